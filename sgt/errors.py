"""
Base exception for user-facing errors.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from SgtUserError:
malformed templates, missing templates, broken catalogs and config files.

Programming errors and bugs (including exceptions raised by callables
bound in the data context) should NOT inherit from SgtUserError;
they will propagate with full tracebacks.
"""

from __future__ import annotations


class SgtUserError(Exception):
    """
    Base class for all user-facing errors in sgt.

    These errors indicate problems that the user can fix:
    template syntax, invalid references, missing files, etc.
    """
    pass


__all__ = ["SgtUserError"]
