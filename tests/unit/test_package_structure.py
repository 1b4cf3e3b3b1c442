"""Test package structure and imports."""

import sys
from pathlib import Path

# Add src to path for testing
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))


def test_package_imports() -> None:
    """Test that semsearch package can be imported."""
    import semsearch

    assert semsearch.__version__ == "0.1.0"


def test_public_api_exports() -> None:
    """Test that the public API is importable from the package root."""
    from semsearch import InputError, SemanticSearch, cosine_similarity

    assert callable(cosine_similarity)
    assert issubclass(InputError, ValueError)
    assert hasattr(SemanticSearch, "pair_by_similarity")


def test_main_module_imports() -> None:
    """Test that main module can be imported without error."""
    from semsearch.__main__ import main

    assert callable(main)
