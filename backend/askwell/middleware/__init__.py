# Middleware package init
"""
Askwell Backend — Middleware Package
====================================

Middleware Chain (outermost first):
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route

    - Rate Limit rejects write floods before a database session is opened
    - Request ID sets the correlation id the access log and error bodies use
    - Logging records method, path, status and duration per request
"""
