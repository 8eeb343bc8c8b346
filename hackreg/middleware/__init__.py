"""
HackReg Backend - Middleware Package
======================================

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [Rate Limit] → [GZip] → Route Handler

    - Request ID first so every later log line and error body carries it
    - Logging wraps rate limiting, so 429 responses are logged too
"""
