# Services package init
"""
Notes Backend: Services Package
==================================

What:  Business logic between the HTTP routes and the JSON store.

Services:
    - identity_service.py: register, login, token verification, profile
    - note_service.py:     note CRUD with ownership checks
    - note_query.py:       pure filter / search / sort / paginate pipeline

Services take the store as an argument and raise the typed errors from
`notes_backend.exceptions`; they never build HTTP responses.
"""
