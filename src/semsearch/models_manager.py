"""Locate, download and pin sentence-transformers models for offline use.

Model names resolve the way sentence-transformers resolves them: an existing
directory is loaded as is, "org/name" is a hub repository, and a bare name
is tried under the sentence-transformers organisation first.
"""

import logging
import os
from pathlib import Path

from .embeddings.models import EMBEDDING_MODEL
from .errors import ModelNotAvailableError

logger = logging.getLogger(__name__)

SENTENCE_TRANSFORMERS_ORG = "sentence-transformers"
OFFLINE_ENV_VARS = ("HF_HUB_OFFLINE", "TRANSFORMERS_OFFLINE")
# Any of these inside a snapshot means the download completed
MODEL_FILES = ("pytorch_model.bin", "config.json")


def get_model_cache_dir() -> Path:
    """Get the huggingface hub cache directory, honouring HF_HOME."""
    cache_home = os.environ.get("HF_HOME", Path.home() / ".cache/huggingface")
    return Path(cache_home) / "hub"


def local_model_path(model_name: str) -> Path | None:
    """The model directory if model_name points at one on disk."""
    path = Path(model_name).expanduser()
    return path if path.is_dir() else None


def hub_repo_ids(model_name: str) -> list[str]:
    """Hub repositories a model name may refer to, most likely first.

    Example:
        hub_repo_ids("all-MiniLM-L6-v2")
        # ["sentence-transformers/all-MiniLM-L6-v2", "all-MiniLM-L6-v2"]
    """
    if "/" in model_name:
        return [model_name]
    return [f"{SENTENCE_TRANSFORMERS_ORG}/{model_name}", model_name]


def _has_model_files(directory: Path) -> bool:
    for _root, _dirs, files in os.walk(directory):
        if any(name in files for name in MODEL_FILES):
            return True
        if any(name.endswith(".safetensors") for name in files):
            return True
    return False


def find_cached_model(model_name: str = EMBEDDING_MODEL) -> Path | None:
    """Where the model can be loaded from without network access.

    Args:
        model_name: Hub name (with or without organisation) or local path

    Returns:
        The local directory or hub cache entry, or None if neither exists
    """
    local = local_model_path(model_name)
    if local is not None:
        return local

    cache_dir = get_model_cache_dir()
    for repo_id in hub_repo_ids(model_name):
        repo_dir = cache_dir / f"models--{repo_id.replace('/', '--')}"
        if repo_dir.is_dir() and _has_model_files(repo_dir):
            return repo_dir
    return None


def check_model_cached(model_name: str = EMBEDDING_MODEL) -> bool:
    """Check if a model can be loaded without downloading."""
    return find_cached_model(model_name) is not None


def configure_offline_mode(model_name: str = EMBEDDING_MODEL) -> bool:
    """Switch the hub libraries to offline mode if the model is available.

    Returns:
        True if the model was found and offline mode is set
    """
    location = find_cached_model(model_name)
    if location is None:
        return False

    logger.debug(f"Using {model_name} from {location} in offline mode")
    for name in OFFLINE_ENV_VARS:
        os.environ[name] = "1"
    return True


def ensure_models_available(model_name: str = EMBEDDING_MODEL) -> None:
    """Make sure the model loads offline.

    Raises:
        ModelNotAvailableError: If the model is neither cached nor on disk
    """
    if not configure_offline_mode(model_name):
        raise ModelNotAvailableError(
            f"Embedding model {model_name} not found in {get_model_cache_dir()}. "
            f"Download it once with:\n"
            f"  semsearch --model {model_name} download-models"
        )


def download_models(model_name: str = EMBEDDING_MODEL) -> int:
    """Download the model into the hub cache so later runs work offline.

    Returns:
        Embedding dimension of the downloaded model

    Raises:
        ModelNotAvailableError: If the model cannot be fetched or loaded
    """
    # Import here to avoid loading torch at module import time
    from sentence_transformers import SentenceTransformer

    # A previous ensure_models_available() may have pinned offline mode
    for name in OFFLINE_ENV_VARS:
        os.environ.pop(name, None)

    try:
        model = SentenceTransformer(model_name)
    except Exception as e:
        raise ModelNotAvailableError(
            f"Failed to download model {model_name}: {e}", original_error=e
        ) from e

    dimension = int(model.get_sentence_embedding_dimension())
    logger.info(f"Downloaded {model_name} (dimension {dimension})")
    return dimension
