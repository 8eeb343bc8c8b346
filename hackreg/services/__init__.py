"""
HackReg Backend - Services Layer
==================================

Service Inventory:
    - challenge_generator: Pure puzzle generation (no I/O)
    - ChallengeStore (abstract): Persistence contract for challenges
    - SQLAlchemyChallengeStore: Atomic insert-if-absent and conditional updates
    - ChallengeService: get-or-create and submission judging
    - registration: Registration window gate
"""
