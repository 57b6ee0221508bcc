"""Functional Core — pure domain logic with no IO.

Invariants:
    - Modules here never import from services/, api/ or infrastructure/
    - No async, no DB access, no clock reads unless the time is passed in
"""
