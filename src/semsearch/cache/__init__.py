"""Embedding lookup scoped to a single ranking or matching call."""

from .store import EmbeddingStore, build_embedding_store, project_all

__all__ = ["EmbeddingStore", "build_embedding_store", "project_all"]
