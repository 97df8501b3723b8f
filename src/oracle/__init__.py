"""Oracle — адаптер над внешним фидом цены актив/фиат."""

from .adapter import OracleConfig, PriceFeed, PriceOracleAdapter, StaticPriceFeed

__all__ = [
    "PriceFeed",
    "StaticPriceFeed",
    "OracleConfig",
    "PriceOracleAdapter",
]
