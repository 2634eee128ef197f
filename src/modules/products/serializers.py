"""Product DRF serializers for API output.

The serializers operate at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    """Serializer for a stored Product (write responses)."""

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "price",
            "image_url",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]


class StockSnapshotSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField()
    reorder_level = serializers.IntegerField()
    low_stock = serializers.BooleanField()


class ProductViewSerializer(serializers.Serializer):
    """Read-only serializer for ``ProductViewDTO`` (product + stock)."""

    id = serializers.UUIDField()
    name = serializers.CharField()
    description = serializers.CharField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2)
    image_url = serializers.CharField()
    stock_details = StockSnapshotSerializer(allow_null=True)
    stock_status = serializers.CharField()
