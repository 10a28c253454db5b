"""
Interfaces layer package.

Contains FastAPI routers and Pydantic request/response schemas.
Routes run inside the request orchestrator and call use cases.
"""
