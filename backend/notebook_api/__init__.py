"""
Notebook API - Application Package Initializer
==============================================

What: Marks the `notebook_api` directory as a Python package.
Who:  Imported by uvicorn (`notebook_api.main:app`), Alembic, and pytest.

Architecture Note:
    The backend is a thin layered service:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     Access Scoping (services/)      │  ← authorize + owner filter
    ├─────────────────────────────────────┤
    │    Resource Services (services/)    │  ← not-found / error policy
    ├─────────────────────────────────────┤
    │     Document Store (database.py)    │  ← async SQLAlchemy primitives
    └─────────────────────────────────────┘

    Every store call made by a resource service carries an owner constraint
    derived from the verified bearer token.
"""

__version__ = "1.0.0"
