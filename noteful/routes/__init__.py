# Routes package init
"""
Noteful Backend — API Routes Package
======================================

What:  HTTP route handlers that accept requests and return responses.
How:   One module per resource; each exposes a `router` mounted in main.py.

Route Inventory:
    - folders.py: /api/folders, /api/folders/{id}    (CRUD, bearer)
    - tags.py:    /api/tags, /api/tags/{id}          (CRUD, bearer)
    - notes.py:   /api/notes, /api/notes/{id}        (CRUD + filters, bearer)
    - users.py:   POST /api/users                    (registration)
    - auth.py:    POST /api/login, POST /api/refresh (tokens)
    - health.py:  GET  /api/health                   (service health check)

Routes stay thin: validate path ids, call a repository, shape the
response. Ownership, uniqueness and reference cleanup live in the
repositories.
"""
