"""Command line interface (``ghdash``)."""
