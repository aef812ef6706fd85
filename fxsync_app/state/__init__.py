"""
Session state and connection state machine module.

Holds the immutable session snapshot and the connection health machine
(disconnected → connecting → connected | error).
"""
