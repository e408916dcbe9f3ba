"""HTTP API for the screening interview."""
