# Middleware package init
"""
Notes Backend: Middleware Package
====================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: correlation ID, stored in a ContextVar and echoed back
    2. Logging: one access line per request, tagged with that ID
    3. CORS: FastAPI's CORSMiddleware (handles preflight)

    Responses pass back through the same chain in reverse, so the logging
    middleware sees the final status and the request ID lands in the headers.
"""
