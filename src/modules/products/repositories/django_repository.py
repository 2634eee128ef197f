"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern for look-ups: methods
return ``None`` / ``False`` for missing or malformed IDs instead of
raising.  Database failures are translated into ``ProductStoreError``
so the Service Layer never handles ORM exceptions.
"""

from __future__ import annotations

from typing import List, Optional

import structlog

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction

from modules.products.exceptions import ProductStoreError
from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Product]:
        """Retrieve a product by primary key.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return Product.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None
        except DatabaseError as exc:
            logger.error("product.read_failed", product_id=str(id), error=str(exc))
            raise ProductStoreError(f"Failed to read product {id}.") from exc

    def list(self) -> List[Product]:
        """List all products in catalogue order."""
        try:
            return list(Product.objects.all())
        except DatabaseError as exc:
            logger.error("product.list_failed", error=str(exc))
            raise ProductStoreError("Failed to list products.") from exc

    def exists(self, id: str) -> bool:
        try:
            return Product.objects.filter(id=id).exists()
        except (ValueError, ValidationError):
            return False
        except DatabaseError as exc:
            logger.error("product.read_failed", product_id=str(id), error=str(exc))
            raise ProductStoreError(f"Failed to read product {id}.") from exc

    def save(self, entity: Product) -> Product:
        """Persist (create or update) a product."""
        try:
            with transaction.atomic():
                entity.save()
        except DatabaseError as exc:
            logger.error("product.save_failed", name=entity.name, error=str(exc))
            raise ProductStoreError("Failed to save product.") from exc
        return entity

    def delete(self, id: str) -> bool:
        """Delete a product by ID.

        Returns ``True`` if the product was found and deleted,
        ``False`` if no product exists with the given ID.
        """
        try:
            with transaction.atomic():
                deleted, _ = Product.objects.filter(id=id).delete()
        except (ValueError, ValidationError):
            return False
        except DatabaseError as exc:
            logger.error("product.delete_failed", product_id=str(id), error=str(exc))
            raise ProductStoreError(f"Failed to delete product {id}.") from exc
        return bool(deleted)
