# Routes package init
"""
Notebook API - Routes Package
=============================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - health.py:   GET  /                       (liveness text)
                   GET  /health                 (store connectivity)
    - notes.py:    POST /notes, GET /notes
                   GET/PUT/DELETE /notes/{id}
    - folders.py:  POST /folders, GET /folders
                   GET/DELETE /folders/{id}

Design Principle:
    Routes are thin. They declare `authorize` first, pass the store and the
    subject id to a ResourceService, and pick the status code. Ownership
    scoping lives in services/access.py and is never re-derived here.
"""
