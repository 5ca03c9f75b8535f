"""Command-line interface for msgidrec."""
