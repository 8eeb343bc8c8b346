"""
HackReg Backend - API Routes Package
======================================

Route Inventory:
    - registration.py: GET  /registration/status/      (is registration open)
    - challenge.py:    GET  /registration/challenge/   (fetch or create puzzle)
                       POST /registration/challenge/   (submit an answer)
    - health.py:       GET  /health                    (service health check)

Routes stay thin: extract request data, call a service, return its result.
"""
