# Routes package init
"""
Notes Backend: API Routes Package
====================================

Route Inventory:
    - health.py:  GET  /, /health
    - auth.py:    POST /auth/register, POST /auth/login
    - users.py:   GET  /users/me
    - notes.py:   GET/POST /notes, GET/PUT/DELETE /notes/{note_id}

Routes stay thin: parse the request, call a service, wrap the result in the
success envelope. Errors propagate as typed exceptions to the handlers
registered in main.py.
"""
