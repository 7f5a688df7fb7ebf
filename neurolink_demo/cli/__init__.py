"""Command-line interface for the NeuroLink demo."""
