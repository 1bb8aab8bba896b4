"""HTTP API for the pair core."""
