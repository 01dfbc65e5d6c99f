"""Application layer: use-case services that orchestrate domain and infrastructure."""
