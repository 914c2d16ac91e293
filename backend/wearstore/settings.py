import os
import sys
from decimal import Decimal
from pathlib import Path
from dotenv import load_dotenv
from django.core.exceptions import ImproperlyConfigured

BASE_DIR = Path(__file__).resolve().parent.parent
# Try root project .env (one directory up from BASE_DIR) first, then local
root_env = (BASE_DIR.parent / '.env')
local_env = (BASE_DIR / '.env')
if root_env.exists():
    load_dotenv(root_env)
elif local_env.exists():
    load_dotenv(local_env)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_decimal(name: str, default: str) -> Decimal:
    raw = os.getenv(name, default)
    try:
        return Decimal(raw)
    except ArithmeticError:
        raise ImproperlyConfigured(f'{name} must be a number, got {raw!r}')


# Django refuses to start without a key even though the storefront core never
# signs anything. A deterministic dev key is fine outside production.
SECRET_KEY = os.getenv('DJANGO_SECRET_KEY') or os.getenv('SECRET_KEY') or 'dev-secret-key'
DEBUG = os.getenv('DEBUG', 'True') == 'True'

if SECRET_KEY == 'dev-secret-key' and not DEBUG:
    raise ImproperlyConfigured(
        'SECRET_KEY is missing or using insecure default. Set DJANGO_SECRET_KEY or SECRET_KEY env var.'
    )

INSTALLED_APPS = [
    'rest_framework',
    'apps.common',
    'apps.catalog',
    'apps.carts',
    'apps.storefront',
]

# The storefront keeps no relational data; the cart lives in the cache.
DATABASES = {}

# Caching (Redis by default)
"""Caching configuration.
The cart ledger persists through the default cache, so a deployment gets Redis
via the docker compose service name `redis`. Cache exceptions are ignored so an
outage degrades to an in-memory cart instead of failing the session."""
REDIS_URL = os.getenv('REDIS_URL', 'redis://redis:6379/1')

CACHES = {
    'default': {
        'BACKEND': 'django_redis.cache.RedisCache',
        'LOCATION': REDIS_URL,
        'OPTIONS': {
            'CLIENT_CLASS': 'django_redis.client.DefaultClient',
            'IGNORE_EXCEPTIONS': True,
        },
        'KEY_PREFIX': os.getenv('CACHE_KEY_PREFIX', 'wearstore'),
        'TIMEOUT': None,
    }
}

# Use a local in-memory cache under pytest so tests need no Redis
USING_PYTEST = (
    'pytest' in sys.modules
    or os.getenv('PYTEST_CURRENT_TEST') is not None
    or any(os.path.basename(arg).startswith('pytest') for arg in sys.argv)
)

if 'test' in sys.argv or USING_PYTEST:
    CACHES = {
        'default': {
            'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
            'LOCATION': 'wearstore-test-cache',
            'TIMEOUT': None,
        }
    }

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'plain': {'format': '%(asctime)s %(levelname)s %(name)s %(message)s'},
    },
    'handlers': {
        'console': {'class': 'logging.StreamHandler', 'formatter': 'plain'},
    },
    'loggers': {
        'apps': {
            'handlers': ['console'],
            'level': os.getenv('STOREFRONT_LOG_LEVEL', 'INFO'),
        },
    },
}

# ---------------------------------------------------------------------------
# STOREFRONT
# Everything the catalog browser reads at runtime. Each key can be
# overridden through a STOREFRONT_* environment variable.
# ---------------------------------------------------------------------------
_price_min = _env_decimal('STOREFRONT_PRICE_MIN', '0')
_price_max = _env_decimal('STOREFRONT_PRICE_MAX', '250')
if _price_min < 0 or _price_max < _price_min:
    raise ImproperlyConfigured('STOREFRONT_PRICE_MIN/MAX must satisfy 0 <= min <= max')

_rating_seed = os.getenv('STOREFRONT_RATING_SEED')
_cart_timeout = os.getenv('STOREFRONT_CART_TIMEOUT')

STOREFRONT = {
    'BRAND_NAME': os.getenv('STOREFRONT_BRAND_NAME', '404WEAR'),
    'CURRENCY': os.getenv('STOREFRONT_CURRENCY', 'RM'),
    'CART_STORAGE_KEY': os.getenv('STOREFRONT_CART_KEY', '404wear_cart_v2'),
    'CART_STORAGE_TIMEOUT': int(_cart_timeout) if _cart_timeout else None,
    'DEFAULT_SORT': os.getenv('STOREFRONT_DEFAULT_SORT', 'featured'),
    'PAGE_SIZE': int(os.getenv('STOREFRONT_PAGE_SIZE', '12')),
    'PRICE_RANGE': {'min': _price_min, 'max': _price_max},
    'ENABLE_PRICE_FILTER': _env_bool('STOREFRONT_ENABLE_PRICE_FILTER', True),
    'ENABLE_SEARCH': _env_bool('STOREFRONT_ENABLE_SEARCH', True),
    'PERSIST_CART': _env_bool('STOREFRONT_PERSIST_CART', True),
    # Search and price inputs are coalesced for this long before recomputing
    'RECOMPUTE_DEBOUNCE_SECONDS': int(os.getenv('STOREFRONT_DEBOUNCE_MS', '300')) / 1000,
    'CATALOG_PATH': os.getenv(
        'STOREFRONT_CATALOG_PATH', str(BASE_DIR / 'data' / 'products.json')
    ),
    'DEFAULT_RATING_SEED': int(_rating_seed) if _rating_seed else None,
}
