"""
AboApp Backend — Application Package Initializer
==================================================

What: Marks the `aboapp` directory as a Python package.
Who:  Used by uvicorn (`uvicorn aboapp.main:app`), Alembic, and pytest.

Architecture Note:
    The backend is layered the same way top to bottom:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← validation, aggregation, collaborators
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    External collaborators (auth provider, email provider) are reached only
    from the services layer.
"""

__version__ = "1.0.0"
