"""
FastAPI REST API for the book records server.

This module provides:
- Book creation, lookup, price update and deletion
- Filtered book counts and title-sorted listings
- Runtime inspection and change of the server log levels
"""
