from functools import lru_cache

from ..core.config import settings
from ..services.pricing_config import DEFAULT_PRICING_CONFIG, PricingConfig, load_pricing_config


@lru_cache(maxsize=1)
def get_pricing_config() -> PricingConfig:
    """Return the process-wide pricing tables, loading them on first use.

    Tests swap tables through ``app.dependency_overrides[get_pricing_config]``.
    """
    path = settings.PRICING_CONFIG_PATH
    if not path:
        return DEFAULT_PRICING_CONFIG
    return load_pricing_config(path, default_currency=settings.DEFAULT_CURRENCY)
