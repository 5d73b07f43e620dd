"""Command line interface for Motion Core."""
