"""Infrastructure layer — database, document store, index catalog.

This layer depends on stdlib, pydantic, and SQLAlchemy.
It must never import from traversal, services, commands, or output.
The traversal and service layers reach the store only through
:meth:`DocumentStore.query`.
"""
