"""Domain layer — record kinds, index declarations, and error types.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, traversal, commands, or config.
"""
