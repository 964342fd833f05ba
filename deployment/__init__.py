"""HTTP API for the RAG core."""
