"""Product domain exceptions.

Raised by the Service Layer when an operation cannot complete.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.  Stock service failures never surface
here; see ``modules.stock.exceptions``.
"""

from __future__ import annotations


class ProductNotFound(Exception):
    """The requested product does not exist."""


class ProductStoreError(Exception):
    """The product database failed; the operation was aborted."""
