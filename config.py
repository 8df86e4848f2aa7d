import os
import sys

from dotenv import load_dotenv

from enums.runtime_environment import RuntimeEnvironment

# Load .env but don't override existing environment variables
# This allows test runs to set RUNTIME_ENVIRONMENT=TEST before import
load_dotenv(".env", override=False)

try:
    RUNTIME_ENVIRONMENT = RuntimeEnvironment(os.environ.get("RUNTIME_ENVIRONMENT", RuntimeEnvironment.DEV.value))
except ValueError as e:
    valid_values = [env.value for env in RuntimeEnvironment]
    print(f"\n ERROR: Invalid RUNTIME_ENVIRONMENT configuration\n", file=sys.stderr)
    print(f"Reason: {e}", file=sys.stderr)
    print(f"Valid values: {', '.join(valid_values)}", file=sys.stderr)
    print(f"\nAdd to .env: RUNTIME_ENVIRONMENT={valid_values[0]}\n", file=sys.stderr)
    sys.exit(1)


def _get_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _get_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    return int(value) if value else default


def _get_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    return float(value) if value else default


# Web server
WEBAPP_HOST = os.environ.get("WEBAPP_HOST", "0.0.0.0")
WEBAPP_PORT = _get_int("WEBAPP_PORT", 8000)
CORS_ALLOWED_ORIGINS = [
    origin.strip() for origin in os.environ.get("CORS_ALLOWED_ORIGINS", "*").split(",") if origin.strip()
]

# Persistence
DB_URL = os.environ.get("DB_URL", "sqlite+aiosqlite:///data/storefront.db")
REDIS_URL = os.environ.get("REDIS_URL", "redis://localhost:6379/0")

# Logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
LOG_RETENTION_DAYS = _get_int("LOG_RETENTION_DAYS", 7)
LOG_MASK_SECRETS = _get_bool("LOG_MASK_SECRETS", True)

# Pricing & orders
CURRENCY = os.environ.get("CURRENCY", "inr")
PRICE_TOLERANCE = _get_float("PRICE_TOLERANCE", 0.01)
# Cross-check client itemsPrice against the cart total (off keeps the legacy trust model)
ORDER_VERIFY_ITEMS_PRICE = _get_bool("ORDER_VERIFY_ITEMS_PRICE", False)
LOW_STOCK_THRESHOLD = _get_int("LOW_STOCK_THRESHOLD", 5)
PRODUCTS_PER_PAGE = _get_int("PRODUCTS_PER_PAGE", 8)

# Rate limiting
MAX_ORDERS_PER_USER_PER_HOUR = _get_int("MAX_ORDERS_PER_USER_PER_HOUR", 10)
MAX_PAYMENT_INTENTS_PER_HOUR = _get_int("MAX_PAYMENT_INTENTS_PER_HOUR", 20)

# AI-backed query normalization (OpenAI-compatible endpoint)
AI_API_KEY = os.environ.get("AI_API_KEY", "")
AI_BASE_URL = os.environ.get("AI_BASE_URL", "https://api.groq.com/openai/v1")
AI_MODEL = os.environ.get("AI_MODEL", "llama-3.1-8b-instant")
AI_TIMEOUT_SECONDS = _get_float("AI_TIMEOUT_SECONDS", 8.0)
AI_RECOMMENDATION_LIMIT = _get_int("AI_RECOMMENDATION_LIMIT", 5)
AI_FALLBACK_RECOMMENDATION_LIMIT = _get_int("AI_FALLBACK_RECOMMENDATION_LIMIT", 10)

# Payment gateway
PAYMENT_GATEWAY_URL = os.environ.get("PAYMENT_GATEWAY_URL", "https://api.stripe.com/v1")
PAYMENT_GATEWAY_SECRET_KEY = os.environ.get("PAYMENT_GATEWAY_SECRET_KEY", "")
PAYMENT_GATEWAY_TIMEOUT_SECONDS = _get_float("PAYMENT_GATEWAY_TIMEOUT_SECONDS", 15.0)
PAYMENT_METADATA_COMPANY = os.environ.get("PAYMENT_METADATA_COMPANY", "Storefront")
