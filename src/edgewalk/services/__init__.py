"""Service layer — setup, seeding, membership writes, and traversal, returning ServiceResult.

Services may import from domain, infrastructure, and traversal layers.
They must never import from commands or output.
"""
