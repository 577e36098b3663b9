"""HTTP API for Picado."""
