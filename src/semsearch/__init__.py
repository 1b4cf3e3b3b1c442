"""semsearch - rank and pair text items by embedding similarity."""

from .core import SemanticSearch
from .errors import (
    DegenerateVectorError,
    DimensionError,
    InputError,
    ModelNotAvailableError,
    SemanticSearchError,
    SolverInvariantError,
)
from .search.models import MatchedPair, ScoredItem
from .similarity import cosine_similarity

__version__ = "0.1.0"
__all__ = [
    "DegenerateVectorError",
    "DimensionError",
    "InputError",
    "MatchedPair",
    "ModelNotAvailableError",
    "ScoredItem",
    "SemanticSearch",
    "SemanticSearchError",
    "SolverInvariantError",
    "cosine_similarity",
]
