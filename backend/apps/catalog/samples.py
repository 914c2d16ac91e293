"""Built-in products shown when the catalog source cannot be used."""

SAMPLE_PRODUCTS = [
    {
        "id": 1,
        "title": "Cowboy Like Me",
        "description": "Vintage inspired denim jacket with embroidered western details",
        "price": "250.00",
        "salePrice": "225.00",
        "mainCategory": "tops",
        "subCategory": "oversize",
        "image": "https://images.unsplash.com/photo-1551028719-00167b16eac5?w=400&h=500&fit=crop",
        "color": "Blue",
        "size": ["S", "M", "L", "XL"],
        "material": "Premium Denim",
        "tags": ["denim", "jacket", "vintage", "western"],
        "featured": True,
        "inStock": True,
        "sku": "404-TOPS-001",
        "rating": 4.5,
        "reviewCount": 42,
    },
    {
        "id": 2,
        "title": "Oat Silk",
        "description": "Premium silk blend oversized shirt in natural oat color",
        "price": "180.00",
        "salePrice": "162.00",
        "mainCategory": "tops",
        "subCategory": "oversize",
        "image": "https://images.unsplash.com/photo-1596755094514-f87e34085b2c?w=400&h=500&fit=crop",
        "color": "Beige",
        "size": ["S", "M", "L"],
        "material": "Silk Blend",
        "tags": ["silk", "shirt", "oversized", "premium"],
        "featured": True,
        "inStock": True,
        "sku": "404-TOPS-002",
        "rating": 4.7,
        "reviewCount": 38,
    },
    {
        "id": 3,
        "title": "Midnight Necklace",
        "description": "Sterling silver necklace with geometric pendant",
        "price": "90.00",
        "mainCategory": "accessories",
        "subCategory": "necklace",
        "image": "https://images.unsplash.com/photo-1599643478518-a784e5dc4c8f?w=400&h=500&fit=crop",
        "color": "Silver",
        "size": ["One Size"],
        "material": "Sterling Silver",
        "tags": ["necklace", "silver", "geometric", "jewelry"],
        "featured": True,
        "inStock": True,
        "sku": "404-ACC-001",
        "rating": 4.8,
        "reviewCount": 56,
    },
]
