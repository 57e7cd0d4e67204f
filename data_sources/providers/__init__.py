"""
Providers package - Market data source implementations.
"""

from data_sources.providers.alpha_vantage import AlphaVantageSource


__all__ = [
    "AlphaVantageSource",
]
