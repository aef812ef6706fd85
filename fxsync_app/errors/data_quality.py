"""
Data quality error classifications for remote source responses.

These exceptions describe responses that arrived but cannot be trusted:
missing fields, wrong types, or ordering violations. All of them are
recovered at the data source boundary by substituting fallback data.
"""

from typing import Optional, Dict, Any


class DataQualityError(Exception):
    """Base class for data quality issues that can be handled gracefully."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class TemporalDataError(DataQualityError):
    """Timestamp ordering or horizon issues in a response."""

    def __init__(self, message: str, timestamp: Optional[str] = None,
                 expected_after: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.timestamp = timestamp
        self.expected_after = expected_after


class PartialDataError(DataQualityError):
    """Some entries of an otherwise usable response are missing."""

    def __init__(self, message: str, missing_fields: Optional[list] = None,
                 available_fields: Optional[list] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.missing_fields = missing_fields or []
        self.available_fields = available_fields or []


class MissingDataError(DataQualityError):
    """Required data is completely missing."""

    def __init__(self, message: str, data_type: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.data_type = data_type


class MalformedDataError(DataQualityError):
    """Data exists but is in incorrect format."""

    def __init__(self, message: str, raw_data: Optional[str] = None,
                 expected_format: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.raw_data = raw_data
        self.expected_format = expected_format
