"""Core Layer: pure domain logic, no IO, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, models/ or db/
    - Functions take `now` explicitly instead of reading the clock
"""
