# Models package init
"""
Notebook API - ORM Models Package
=================================

What:  SQLAlchemy models for the document collections.
How:   `document.py` defines the declarative Base, the shared DocumentMixin
       and the Note / Folder tables, plus the COLLECTIONS registry used by
       DocumentStore to resolve a collection name to its table.
"""
