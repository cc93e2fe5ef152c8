# Routes package init
"""
AboApp Backend — API Routes Package
=====================================

Route Inventory:
    - auth.py:           POST /api/auth/code, /api/auth/verify, /api/auth/logout
                         GET  /api/auth/me
    - subscriptions.py:  GET/POST /api/subscriptions
                         POST     /api/subscriptions/{id}/reactivate
                         DELETE   /api/subscriptions/{id}
                         GET      /api/costs
    - reminders.py:      GET  /api/reminder-run
    - health.py:         GET  /health
    - deps.py:           bearer-token → UserContext dependency

Routes stay thin: parse the request, call a service, return its result.
"""
