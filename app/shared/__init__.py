"""
Shared module package.

Contains cross-cutting concerns used by every route:
- Error taxonomy and mapping
- Structured logging
- Rate limiting and security headers
- Dependency guard and request orchestration
"""
