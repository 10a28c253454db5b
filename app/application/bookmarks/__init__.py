"""Bookmarks bounded context — use cases."""
