"""
Notes Backend: Application Package Initializer
=================================================

What: Personal notes organizer API (accounts, bearer sessions, per-user notes).
Who:  Imported by uvicorn (`notes_backend.main:app`), pytest, and the routers.

Architecture Note:
    ┌─────────────────────────────────────┐
    │   Routes + Dependencies (HTTP)      │  ← status codes, envelopes, auth gate
    ├─────────────────────────────────────┤
    │   Services (identity, notes)        │  ← validation, ownership, querying
    ├─────────────────────────────────────┤
    │   Models & Schemas (Pydantic)       │  ← stored records + API contracts
    ├─────────────────────────────────────┤
    │   JsonStore (persistence)           │  ← in-memory mirror of one JSON file
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
