from decimal import Decimal

from django.utils.translation import gettext_lazy as _
from rest_framework import ISO_8601, serializers


class CartLineSerializer(serializers.Serializer):
    """Validates one persisted cart entry during restore."""

    id = serializers.IntegerField(min_value=1)
    title = serializers.CharField(default="Untitled Product")
    price = serializers.DecimalField(
        max_digits=None, decimal_places=None, min_value=Decimal("0"), default=Decimal("0")
    )
    salePrice = serializers.DecimalField(
        source="sale_price",
        max_digits=None,
        decimal_places=None,
        min_value=Decimal("0"),
        allow_null=True,
        default=None,
    )
    image = serializers.CharField(allow_blank=True, default="")
    color = serializers.CharField(allow_blank=True, default="")
    size = serializers.ListField(
        source="sizes", child=serializers.CharField(), default=list
    )
    quantity = serializers.IntegerField(min_value=1)
    selectedSize = serializers.CharField(
        source="selected_size", allow_null=True, default=None
    )
    selectedColor = serializers.CharField(
        source="selected_color", allow_null=True, allow_blank=True, default=None
    )
    addedAt = serializers.DateTimeField(
        source="added_at", required=False, input_formats=[ISO_8601]
    )

    def validate(self, attrs):
        attrs = super().validate(attrs)
        size = attrs.get("selected_size")
        sizes = attrs.get("sizes") or []
        if size and sizes and size not in sizes:
            raise serializers.ValidationError(
                {"selectedSize": _("Selected size is not offered for this product.")}
            )
        return attrs
