"""
Bookmark API — per-user URL bookmarks behind a resilient HTTP surface.

Application package root. A modular monolith using hexagonal
architecture (ports & adapters).

Bounded contexts:
    - bookmarks: list, create and delete a user's bookmarks.

Layers:
    - domain: Entities, ports (ABCs), domain errors.
    - application: Use cases, DTOs.
    - infrastructure: Supabase adapters implementing domain ports.
    - interfaces: FastAPI routers, Pydantic schemas.
    - shared: Cross-cutting concerns (errors, logging, rate limiting,
      dependency guard, request orchestration).
"""
