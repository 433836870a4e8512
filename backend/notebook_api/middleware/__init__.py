# Middleware package init
"""
Notebook API - Middleware Package
=================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: correlation id in a ContextVar and the X-Request-ID header
    2. Logging: one access-log line per request, tagged with the request id
    3. CORS: FastAPI's CORSMiddleware (preflight + headers)

Authentication is not middleware: it is the `authorize` dependency,
declared only by protected routes.
"""
