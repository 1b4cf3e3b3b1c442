"""Entry point for running semsearch as a module."""

from .cli import app


def main() -> None:
    """Main entry point for the semsearch CLI application."""
    app()


if __name__ == "__main__":
    main()
