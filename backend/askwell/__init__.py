"""
Askwell Backend — Application Package Initializer
=================================================

What: Marks the `askwell` directory as a Python package.
Who:  Imported by uvicorn (`askwell.main:app`), Alembic and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (votes, acceptance,      │  ← Invariants, transactions
    │   tags, notifications, queries)     │
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Services never open their own transactions. They flush into the session
    they are handed; the caller (the request dependency, or a test) owns the
    commit/rollback boundary, so each API call is one unit of work.
"""

__version__ = "1.0.0"
