"""Product repository interface.

The product store is plain keyed storage: the ``IRepository[Product]``
contract is all the service layer needs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate.

    Implementations raise ``ProductStoreError`` when the underlying
    store fails, so callers can tell "absent" from "broken".
    """
