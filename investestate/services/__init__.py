"""Services Layer: orchestrates repositories around the pure core.

Invariants:
    - Services receive a Repositories bundle; they never construct stores themselves
"""
