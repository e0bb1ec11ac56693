"""Continuation — pagination state classification and the page-counter token codec.

Invariants:
    - The dispatcher never parses tokens; classify_continuation only checks
      presence, never content
    - A sequence is EXHAUSTED exactly when an execution leaves the token None
    - parse_page_token/next_page_token are for sync tables that encode a page
      counter; nothing in dispatch depends on them

Design Decisions:
    - State lives in the caller-held token, not the server (ADR: stateless dispatch)
    - Pure functions, no IO — unit-testable without a running server
"""

from enum import Enum

FIRST_PAGE_NUMBER = 1


class PaginationState(str, Enum):
    """Where a sync sequence stands, as seen from one token."""
    FIRST_PAGE = "first_page"
    MID_SEQUENCE = "mid_sequence"
    EXHAUSTED = "exhausted"


def classify_continuation(token: object, *, executed: bool) -> PaginationState:
    """Classify a token read before (executed=False) or after an execution."""
    if token is not None:
        return PaginationState.MID_SEQUENCE
    return PaginationState.EXHAUSTED if executed else PaginationState.FIRST_PAGE


def parse_page_token(token: object) -> int:
    """Decode a page-counter token; absent or unreadable means page 1."""
    if token is None or token == "":
        return FIRST_PAGE_NUMBER
    try:
        page = int(str(token).strip())
    except ValueError:
        return FIRST_PAGE_NUMBER
    return page if page >= FIRST_PAGE_NUMBER else FIRST_PAGE_NUMBER


def next_page_token(page: int, last_page: int) -> str | None:
    """Token for the page after `page`, or None once `last_page` is reached."""
    if page < last_page:
        return str(page + 1)
    return None
