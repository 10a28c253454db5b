"""
Bookmarks bounded context — domain layer.

- Bookmark and AuthUser entities
- Ports for the bookmark store and the identity provider
- Domain errors (missing bookmark, missing session)
"""
