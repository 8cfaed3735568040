"""Per-market periodic refresh feeding a subscriber."""

from perception.cache.market_cache import MarketStateCache, MarketSubscription

__all__ = ["MarketStateCache", "MarketSubscription"]
