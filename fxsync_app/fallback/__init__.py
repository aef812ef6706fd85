"""
Fallback data module.

Synthesizes structurally valid rates, history, news and forecasts when a
remote source cannot supply them.
"""
from .generator import SEED_QUOTES, FallbackGenerator

__all__ = ["FallbackGenerator", "SEED_QUOTES"]
