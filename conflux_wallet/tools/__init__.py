"""Command-line tools built on RichClient."""
