"""
Data models and response normalization module.

Canonical entities for rates, history, news and forecasts, plus the parsers,
validators and normalizer that turn remote payloads into them.
"""
