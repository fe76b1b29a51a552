"""Base error type for crate-query.

All errors follow the "fail fast" principle with explicit messages.
Domain-specific errors live next to the code that raises them and
inherit from CrateQueryError so callers can catch the whole family.
"""


class CrateQueryError(Exception):
    """Base exception for all crate-query errors."""

    pass
