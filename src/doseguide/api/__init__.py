"""HTTP API for the answering pipeline."""
