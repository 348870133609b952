"""Main entry point for ``python -m mutepuck``."""

from mutepuck.cli import cli

if __name__ == "__main__":
    cli()
