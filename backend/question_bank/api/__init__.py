"""API Layer - FastAPI routes, response envelope and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Every response body is the {success, data?, message?, error?} envelope,
      except the plain "ok" answer to OPTIONS
"""
