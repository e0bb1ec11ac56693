"""Core Layer — catalog, execution context, continuation and errors; no transport, no network.

Invariants:
    - No module in core/ imports from services/, api/, or infrastructure/
    - Nothing in core/ awaits: entries are stored and contexts built, never run here

Design Decisions:
    - Functional core separated from the imperative shell (dispatch, transports)
"""
