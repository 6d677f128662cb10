"""Building blocks for Sui arbitrage bots: Shio auctions, an override object cache and chain utilities."""

__version__ = "0.1.0"