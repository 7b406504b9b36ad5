# Routes package init
"""
More Than Trip Core — API Routes Package
==========================================

Route Inventory:
    - photos.py:   POST   /api/photos                        (upload)
                   GET    /api/photos                        (list, equality filters)
                   GET    /api/photos/{id}                   (detail with tags, likes)
                   PUT    /api/photos/{id}
                   DELETE /api/photos/{id}
                   GET    /api/photos/{id}/tags
                   POST   /api/photos/{id}/tags/{tag_id}
                   POST   /api/photos/{id}/likes
                   DELETE /api/photos/{id}/likes/{user_id}
    - regions.py:  CRUD   /api/regions          + GET /api/regions/by-name/{name}
    - trips.py:    CRUD   /api/trips            + POST /api/trips/{id}/tags/{tag_id}
    - tags.py:     POST/GET /api/tags, DELETE /api/tags/{id}
    - users.py:    CRUD   /api/users            + GET /api/users/by-username/{name}
    - health.py:   GET    /health

Routes stay thin: pull data out of the request, call a service, pick the
status code. Errors are raised, never formatted here; main.py's handlers
turn them into responses.
"""
