"""
FastAPI service for FootyCast.

Exposes the stored fixtures and predictions over JSON endpoints and a
server-sent events stream.
"""
