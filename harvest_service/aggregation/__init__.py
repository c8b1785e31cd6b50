from .aggregator import Aggregator, HarvestResult, summarize

__all__ = ["Aggregator", "HarvestResult", "summarize"]
