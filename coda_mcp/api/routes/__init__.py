"""Route Modules — one file per transport.

Invariants:
    - Each module defines its own APIRouter
    - Routes never contain business logic (delegate to CommandDispatch)

Design Decisions:
    - Explicit registration in main.py over auto-discovery
"""
