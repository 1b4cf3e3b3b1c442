"""Text embedding generation using sentence-transformers."""

import logging
import threading
from typing import TYPE_CHECKING

import numpy as np

from .models import EMBEDDING_MODEL, Embedding, EmbeddingBatch

if TYPE_CHECKING:
    from sentence_transformers import SentenceTransformer

logger = logging.getLogger(__name__)


class SentenceTransformerEmbedder:
    """Embed text with a sentence-transformers model.

    Instances are callables mapping one string to one embedding, so they can
    be passed anywhere an embedding function is expected. The model is loaded
    on first use; constructing an embedder is cheap. Loading is guarded by a
    lock, so concurrent first calls share a single model.

    The embedding store recognises instances and embeds all distinct texts
    of a call with one batched generate() instead of one call per text.
    """

    def __init__(
        self,
        model_name: str = EMBEDDING_MODEL,
        device: str | None = None,
        normalize: bool = True,
    ):
        """Initialize embedder with specified model.

        Args:
            model_name: Name of sentence-transformers model to use
            device: Compute device ("cpu", "cuda", "mps"); None or "auto"
                lets sentence-transformers choose
            normalize: Whether to L2-normalize embeddings
        """
        self.model_name = model_name
        self.device = None if device in (None, "auto") else device
        self.normalize = normalize
        self._model: "SentenceTransformer | None" = None  # Lazy load the model
        self._load_lock = threading.Lock()

    @property
    def model(self) -> "SentenceTransformer":
        """Lazy-load the model only when actually needed."""
        if self._model is None:
            with self._load_lock:
                # Another thread may have finished loading while we waited
                if self._model is None:
                    # Import here to avoid loading torch at module import time
                    from sentence_transformers import SentenceTransformer

                    model = SentenceTransformer(self.model_name, device=self.device)
                    logger.info(
                        f"Loaded embedding model {self.model_name} "
                        f"(dimension {model.get_sentence_embedding_dimension()})"
                    )
                    self._model = model
        return self._model

    @property
    def dimension(self) -> int:
        """Embedding dimension reported by the loaded model."""
        return int(self.model.get_sentence_embedding_dimension())

    def generate(self, texts: list[str]) -> EmbeddingBatch:
        """Generate embeddings for one or more texts.

        Args:
            texts: List of text strings to embed

        Returns:
            Numpy array of embeddings with shape (len(texts), dimension)

        Raises:
            ValueError: If texts is empty
        """
        if not texts:
            raise ValueError("Cannot generate embeddings for empty text list")

        embeddings = self.model.encode(
            texts,
            convert_to_numpy=True,
            normalize_embeddings=self.normalize,
        )

        # Ensure correct shape
        if len(texts) == 1:
            embeddings = embeddings.reshape(1, -1)

        return embeddings

    def __call__(self, text: str) -> Embedding:
        """Embed a single text."""
        return np.asarray(self.generate([text])[0])

    def __repr__(self) -> str:
        return f"SentenceTransformerEmbedder(model_name={self.model_name!r})"
