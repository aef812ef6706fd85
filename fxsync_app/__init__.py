"""
FXSync App - Exchange Rate Dashboard Synchronization Core

Keeps a small set of tracked currency pairs synchronized with live rate quotes,
historical series, news and forecasts. Degrades to synthetic fallback data when
remote sources are unavailable so the renderer always has a complete state.
"""

__version__ = "0.1.0"
__author__ = "FXSync Team"
