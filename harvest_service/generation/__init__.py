from .candidates import IdentifierSpace, generate_candidates, iter_candidates

__all__ = ["IdentifierSpace", "generate_candidates", "iter_candidates"]
