"""Runtime settings for the Storefront domain, read once from the environment.

Protean's own configuration (providers, brokers, event store) stays with
``PROTEAN_ENV`` and ``[tool.protean]`` in pyproject.toml; these are the knobs the storefront code
itself reads.
"""

import os


def _int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


# Priced-cart view cache (the cache adapter itself is configured under [tool.protean.caches])
CART_CACHE_TTL_SECONDS = _int("STOREFRONT_CART_CACHE_TTL", 86400)
CART_CACHE_ENABLED = os.getenv("STOREFRONT_CART_CACHE", "on") != "off"

# Email delivery
EMAIL_BACKEND = os.getenv("STOREFRONT_EMAIL_BACKEND", "fake")  # fake | smtp
SMTP_HOST = os.getenv("STOREFRONT_SMTP_HOST", "localhost")
SMTP_PORT = _int("STOREFRONT_SMTP_PORT", 587)
SMTP_USER = os.getenv("STOREFRONT_SMTP_USER", "")
SMTP_PASSWORD = os.getenv("STOREFRONT_SMTP_PASSWORD", "")
SMTP_FROM = os.getenv("STOREFRONT_SMTP_FROM", "orders@storefront.local")
SMTP_TIMEOUT_SECONDS = _int("STOREFRONT_SMTP_TIMEOUT", 10)

# Identifier generation
SKU_MAX_ATTEMPTS = _int("STOREFRONT_SKU_MAX_ATTEMPTS", 10)
ORDER_ID_MAX_ATTEMPTS = _int("STOREFRONT_ORDER_ID_MAX_ATTEMPTS", 5)

# Logging
LOG_DIR = os.getenv("STOREFRONT_LOG_DIR", "")
