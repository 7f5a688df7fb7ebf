"""HTTP API for the NeuroLink demo server."""
