"""
Utility functions module.

Common utility functions for time handling shared across the package.

Time Semantics:
- All timestamps held in session state are timezone-aware UTC datetimes
- Naive timestamps arriving from remote sources are interpreted as UTC
- Wall-clock time comes from an injectable clock so tests can pin "now"
"""
