"""Command-line interface (``sections-transformer``)."""
