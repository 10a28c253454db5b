"""
HTTP resilience helpers shared by every route.

- orchestrator: request lifecycle logging and failure mapping
- dependency_guard: retry, backoff and circuit breaking for upstreams
- request_body: bounded JSON body parsing
- responses: the success/failure JSON envelope
- timeouts: deadline for upstream calls
"""
