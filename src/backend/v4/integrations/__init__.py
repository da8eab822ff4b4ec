"""Integration adapters for external systems (public holiday API, etc).

Keep these modules small and testable:
- No FastAPI request/response objects
- Pure IO + parsing helpers
"""
