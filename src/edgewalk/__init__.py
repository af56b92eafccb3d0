"""edgewalk — paged traversal of many-to-many edges in a document store."""

__version__ = "0.1.0"
