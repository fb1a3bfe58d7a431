"""
In-memory book records: store, filtering and the book service.
"""
