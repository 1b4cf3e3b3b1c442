"""Pytest configuration and fixtures for semsearch tests."""

import sys
import threading
import time
import types
from collections.abc import Callable, Generator
from pathlib import Path

import numpy as np
import pytest


class FakeEmbedder:
    """Deterministic embedding capability backed by a lookup table.

    Records every text it is asked to embed so tests can assert how often
    the capability was invoked.
    """

    def __init__(self, vectors: dict[str, list[float]]) -> None:
        self.vectors = vectors
        self.calls: list[str] = []
        self._lock = threading.Lock()

    def __call__(self, text: str) -> list[float]:
        with self._lock:
            self.calls.append(text)
        return self.vectors[text]


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch) -> Generator[Path]:
    """Point config loading at a per-test path and clear env overrides."""
    import semsearch.config

    config_path = tmp_path / "config" / "config.toml"
    monkeypatch.setattr(semsearch.config, "CONFIG_DIR", config_path.parent)
    monkeypatch.setattr(semsearch.config, "CONFIG_PATH", config_path)
    for name in (
        "SEMSEARCH_MODEL",
        "SEMSEARCH_DEVICE",
        "SEMSEARCH_SIMILARITY",
        "SEMSEARCH_MAX_WORKERS",
        "SEMSEARCH_PARALLEL_THRESHOLD",
    ):
        monkeypatch.delenv(name, raising=False)

    semsearch.config.reset_config_cache()
    yield config_path
    semsearch.config.reset_config_cache()


@pytest.fixture
def fake_embedder() -> Callable[[dict[str, list[float]]], FakeEmbedder]:
    """Factory for lookup-table embedders."""
    return FakeEmbedder


class SlowSentenceTransformer:
    """Stand-in for sentence_transformers.SentenceTransformer.

    Construction is slow so that racing first uses would overlap, and every
    construction is recorded on the class. Text embeds to [len(text), 1, 0].
    """

    constructed: list[str] = []

    def __init__(self, model_name: str, device: str | None = None) -> None:
        time.sleep(0.05)
        SlowSentenceTransformer.constructed.append(model_name)
        self.encode_calls: list[list[str]] = []

    def get_sentence_embedding_dimension(self) -> int:
        return 3

    def encode(
        self,
        texts: list[str],
        convert_to_numpy: bool = True,
        normalize_embeddings: bool = True,
    ) -> np.ndarray:
        self.encode_calls.append(list(texts))
        return np.array([[float(len(text)), 1.0, 0.0] for text in texts])


@pytest.fixture
def slow_sentence_transformers(monkeypatch) -> type[SlowSentenceTransformer]:
    """Install a fake sentence_transformers module for the test."""
    SlowSentenceTransformer.constructed = []
    module = types.ModuleType("sentence_transformers")
    module.SentenceTransformer = SlowSentenceTransformer
    monkeypatch.setitem(sys.modules, "sentence_transformers", module)
    return SlowSentenceTransformer
