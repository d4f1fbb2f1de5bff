"""Configuration for BatchCommit."""
