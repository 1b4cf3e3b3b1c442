"""Configuration management for semsearch.

Loads configuration from ~/.config/semsearch/config.toml.
Priority chain: explicit arguments > env vars > config file > defaults.
"""

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path

from .embeddings.models import EMBEDDING_MODEL
from .similarity import SIMILARITY_MEASURES

CONFIG_DIR = Path.home() / ".config" / "semsearch"
CONFIG_PATH = CONFIG_DIR / "config.toml"

DEFAULT_CONFIG = f"""\
# semsearch configuration

[embeddings]
# sentence-transformers model used by the bundled embedder
model = "{EMBEDDING_MODEL}"

# Compute device: "auto", "cpu", "cuda", "mps"
device = "auto"

# L2-normalize embeddings (required for the "dot" similarity measure)
normalize = true

[search]
# Similarity measure: "cosine" or "dot"
similarity = "cosine"

# Threads used for embedding calls and cost matrix rows (1 = serial)
max_workers = 4

# Groups smaller than this build their cost matrix on the calling thread
parallel_threshold = 32
"""


@dataclass(frozen=True)
class EmbeddingConfig:
    """Embedding model configuration."""

    model: str = EMBEDDING_MODEL
    device: str = "auto"
    normalize: bool = True


@dataclass(frozen=True)
class SearchConfig:
    """Ranking and matching configuration."""

    similarity: str = "cosine"
    max_workers: int = 4
    parallel_threshold: int = 32

    def __post_init__(self) -> None:
        """Validate search settings."""
        if self.similarity not in SIMILARITY_MEASURES:
            available = ", ".join(SIMILARITY_MEASURES)
            raise ValueError(
                f"search.similarity must be one of {available}, got {self.similarity!r}"
            )
        if self.max_workers < 1:
            raise ValueError(
                f"search.max_workers must be at least 1, got {self.max_workers}"
            )
        if self.parallel_threshold < 0:
            raise ValueError(
                "search.parallel_threshold must be non-negative, "
                f"got {self.parallel_threshold}"
            )


@dataclass(frozen=True)
class SemsearchConfig:
    """Top-level semsearch configuration."""

    embeddings: EmbeddingConfig
    search: SearchConfig


_cached_config: SemsearchConfig | None = None


def generate_config(path: Path | None = None) -> Path:
    """Write the default config file and return its path."""
    path = path or CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(DEFAULT_CONFIG)
    return path


def _env_int(name: str, key: str, file_value: object) -> int:
    value = os.getenv(name)
    if value is None:
        return _file_int(key, file_value)
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} ({key}) must be an integer, got {value!r}") from None


def _file_int(key: str, value: object) -> int:
    # bool is an int subclass; TOML true/false is not a count
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{key} must be an integer, got {value!r}")
    return value


def _file_bool(key: str, value: object) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be true or false, got {value!r}")
    return value


def _env_str(name: str, key: str, file_value: object) -> str:
    value = os.getenv(name, file_value)
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a string, got {value!r}")
    return value


def reset_config_cache() -> None:
    """Forget the cached configuration so the next load re-reads it."""
    global _cached_config
    _cached_config = None


def load_config(path: Path | None = None) -> SemsearchConfig:
    """Load configuration from config file with env var overrides.

    A missing file is not an error: built-in defaults apply. The result of
    loading the default path is cached for the life of the process.

    Args:
        path: Config file to read instead of ~/.config/semsearch/config.toml

    Returns:
        Loaded and validated SemsearchConfig.

    Raises:
        ValueError: If a config value or env override is invalid
        tomllib.TOMLDecodeError: If the config file is not valid TOML
    """
    global _cached_config
    if path is None and _cached_config is not None:
        return _cached_config

    config_path = path or CONFIG_PATH
    data: dict = {}
    if config_path.exists():
        with open(config_path, "rb") as f:
            data = tomllib.load(f)

    embeddings = data.get("embeddings", {})
    search = data.get("search", {})
    defaults = SearchConfig()

    config = SemsearchConfig(
        embeddings=EmbeddingConfig(
            model=_env_str(
                "SEMSEARCH_MODEL",
                "embeddings.model",
                embeddings.get("model", EMBEDDING_MODEL),
            ),
            device=_env_str(
                "SEMSEARCH_DEVICE",
                "embeddings.device",
                embeddings.get("device", "auto"),
            ),
            normalize=_file_bool(
                "embeddings.normalize", embeddings.get("normalize", True)
            ),
        ),
        search=SearchConfig(
            similarity=_env_str(
                "SEMSEARCH_SIMILARITY",
                "search.similarity",
                search.get("similarity", defaults.similarity),
            ),
            max_workers=_env_int(
                "SEMSEARCH_MAX_WORKERS",
                "search.max_workers",
                search.get("max_workers", defaults.max_workers),
            ),
            parallel_threshold=_env_int(
                "SEMSEARCH_PARALLEL_THRESHOLD",
                "search.parallel_threshold",
                search.get("parallel_threshold", defaults.parallel_threshold),
            ),
        ),
    )

    if path is None:
        _cached_config = config
    return config
