"""Custom semantic search exceptions."""


class SemanticSearchError(Exception):
    """Base exception for semantic search errors."""

    def __init__(
        self, message: str, original_error: Exception | None = None
    ) -> None:
        super().__init__(message)
        self.original_error = original_error


class InputError(SemanticSearchError, ValueError):
    """Exception raised for caller input that has no valid result.

    This typically occurs when:
    - The collection passed to find_most_similar is empty
    - The two groups passed to pair_by_similarity differ in size
    - A negative result count is requested

    Raised before any embedding call is made.
    """

    pass


class DimensionError(SemanticSearchError, ValueError):
    """Exception raised when embeddings cannot be compared element-wise."""

    def __init__(
        self,
        message: str,
        shapes: tuple[tuple[int, ...], tuple[int, ...]] | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, original_error)
        self.shapes = shapes


class DegenerateVectorError(SemanticSearchError, ValueError):
    """Exception raised for a zero-norm vector where a direction is required."""

    pass


class SolverInvariantError(SemanticSearchError, RuntimeError):
    """Exception raised when the assignment solver contradicts its contract.

    A square cost matrix always admits a perfect matching, so an unassigned
    row or a column used twice indicates a programming error.
    """

    pass


class ModelNotAvailableError(SemanticSearchError):
    """Exception raised when an embedding model can be neither found nor fetched.

    This typically occurs when:
    - The model was never downloaded and offline use was requested
    - The download failed (network, unknown model name, disk space)
    """

    pass
