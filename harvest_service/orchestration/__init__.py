from .batch_fetcher import BatchFetcher, RunCounters

__all__ = ["BatchFetcher", "RunCounters"]
