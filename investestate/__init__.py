"""InvestEstate Application Package: real-estate slot investment API.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
