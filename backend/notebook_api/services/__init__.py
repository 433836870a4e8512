# Services package init
"""
Notebook API - Services Layer
=============================

What:  Everything between the routes (HTTP) and the document store.

Service Inventory:
    - identity.py:          TokenVerifier, bearer credential → verified Identity
    - access.py:            authorize() dependency and the owner-scoped filter helpers
    - resource_service.py:  ResourceService (create/list/get/update/delete) and the
                            note_service / folder_service instances

Services receive the DocumentStore per call instead of importing a global,
so tests can hand them a real SQLite-backed store or a mock.
"""
