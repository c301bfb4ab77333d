"""Configuration, paths, logging and small helpers."""
