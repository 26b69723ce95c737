# Middleware package init
"""
Notes API — Middleware Package
================================

Middleware chain:
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

Request ID runs first so the access log line and any error body carry the
same correlation ID.
"""
