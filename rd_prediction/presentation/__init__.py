"""Presentation layer: HTTP routes, request/response schemas and middleware."""
