"""Infrastructure layer: persistence, security, model runtime and external services."""
