# Routes package init
"""
Askwell Backend — API Routes Package
====================================

What:  HTTP route handlers. Each module covers one resource.

Route Inventory:
    - questions.py:      /api/questions, answers and accept-answer
    - votes.py:          /api/votes
    - tags.py:           /api/tags
    - notifications.py:  /api/notifications
    - users.py:          /api/users, /api/stats
    - health.py:         /health
    - deps.py:           shared dependencies (acting user)

Routes stay thin: read the request, call one service, shape the response.
"""
