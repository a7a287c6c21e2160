"""
Noteful Backend — Application Package
======================================

Multi-user note-taking REST backend: notes, folders and tags scoped per
authenticated user.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns, auth dependency
    ├─────────────────────────────────────┤
    │   Repositories + Reference Coord.   │  ← Scoped CRUD, integrity rules
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Injected async storage handle
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
