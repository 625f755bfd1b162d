"""Command-line interface for tibr."""
