"""Pydantic Schemas — envelope validation at the transport boundary.

Invariants:
    - Schemas validate shape only; argument values stay opaque JSON
"""
