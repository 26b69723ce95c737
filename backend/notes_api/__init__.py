"""
Notes API — Application Package
=================================

A CRUD HTTP API for notes.

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   NoteService (Storage Accessor)    │  ← CRUD on the notes table
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy handle
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
