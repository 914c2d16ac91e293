from decimal import Decimal

from django.utils.translation import gettext_lazy as _
from rest_framework import ISO_8601, serializers

PLACEHOLDER_IMAGE = (
    "https://images.unsplash.com/photo-1560448204-e02f11c3d0e2?w=400&h=500&fit=crop"
)

# Field defaults applied at ingestion when a raw record omits a field (or sends
# null / an empty string). Values that depend on the record's position or on
# randomness (id, sku, rating, reviewCount, createdAt) are filled in by
# apps.catalog.normalization after validation.
PRODUCT_FIELD_DEFAULTS = {
    "title": "Untitled Product",
    "description": "No description available",
    "price": Decimal("0"),
    "salePrice": None,
    "mainCategory": "uncategorized",
    "subCategory": None,
    "image": PLACEHOLDER_IMAGE,
    "color": "Various",
    "size": ("One Size",),
    "material": "Not specified",
    "tags": (),
    "featured": False,
    "inStock": True,
}


def _default_sizes():
    return list(PRODUCT_FIELD_DEFAULTS["size"])


def _default_tags():
    return list(PRODUCT_FIELD_DEFAULTS["tags"])


class ProductRecordSerializer(serializers.Serializer):
    """
    Validation rules for one raw catalog record.

    Keys follow the catalog file's camelCase. ``validated_data`` uses snake_case
    so it can be handed straight to ``ProductMapper.to_dto``.
    """

    id = serializers.IntegerField(required=False, min_value=1)
    title = serializers.CharField(default=PRODUCT_FIELD_DEFAULTS["title"])
    description = serializers.CharField(default=PRODUCT_FIELD_DEFAULTS["description"])
    price = serializers.DecimalField(
        max_digits=None,
        decimal_places=None,
        min_value=Decimal("0"),
        default=PRODUCT_FIELD_DEFAULTS["price"],
    )
    salePrice = serializers.DecimalField(
        source="sale_price",
        max_digits=None,
        decimal_places=None,
        min_value=Decimal("0"),
        allow_null=True,
        default=PRODUCT_FIELD_DEFAULTS["salePrice"],
    )
    mainCategory = serializers.CharField(
        source="main_category", default=PRODUCT_FIELD_DEFAULTS["mainCategory"]
    )
    subCategory = serializers.CharField(
        source="sub_category",
        allow_null=True,
        default=PRODUCT_FIELD_DEFAULTS["subCategory"],
    )
    image = serializers.CharField(default=PRODUCT_FIELD_DEFAULTS["image"])
    color = serializers.CharField(default=PRODUCT_FIELD_DEFAULTS["color"])
    size = serializers.ListField(
        source="sizes", child=serializers.CharField(), default=_default_sizes
    )
    material = serializers.CharField(default=PRODUCT_FIELD_DEFAULTS["material"])
    tags = serializers.ListField(child=serializers.CharField(), default=_default_tags)
    featured = serializers.BooleanField(default=PRODUCT_FIELD_DEFAULTS["featured"])
    inStock = serializers.BooleanField(
        source="in_stock", default=PRODUCT_FIELD_DEFAULTS["inStock"]
    )
    sku = serializers.CharField(required=False)
    rating = serializers.FloatField(required=False, min_value=0.0, max_value=5.0)
    reviewCount = serializers.IntegerField(
        source="review_count", required=False, min_value=0
    )
    createdAt = serializers.DateTimeField(
        source="created_at", required=False, input_formats=[ISO_8601, "%Y-%m-%d"]
    )

    def validate_size(self, value):
        # An explicit empty list means "no sizes"; fall back to the default.
        return value or _default_sizes()


class CategorySerializer(serializers.Serializer):
    name = serializers.CharField()
    icon = serializers.CharField(default="", allow_blank=True)
    description = serializers.CharField(default="", allow_blank=True)
    subCategories = serializers.DictField(
        source="sub_categories", child=serializers.CharField(), default=dict
    )


class PriceRangeSerializer(serializers.Serializer):
    min = serializers.DecimalField(
        max_digits=None, decimal_places=None, min_value=Decimal("0")
    )
    max = serializers.DecimalField(
        max_digits=None, decimal_places=None, min_value=Decimal("0")
    )

    def validate(self, attrs):
        attrs = super().validate(attrs)
        if attrs["min"] > attrs["max"]:
            raise serializers.ValidationError(
                _("Price range minimum must not exceed the maximum.")
            )
        return attrs
