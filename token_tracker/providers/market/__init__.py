"""Market data providers."""

from .birdeye import BirdeyeMarketProvider

__all__ = ["BirdeyeMarketProvider"]
