"""Command line interface for BatchCommit."""
