"""Similarity ranking and optimal matching."""

from .matcher import OptimalMatcher
from .models import MatchedPair, ScoredItem
from .ranker import Ranker

__all__ = ["MatchedPair", "OptimalMatcher", "Ranker", "ScoredItem"]
