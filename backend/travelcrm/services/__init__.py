"""Imperative Shell — services that perform IO around the functional core.

Invariants:
    - Every service receives its AsyncSession explicitly (no ambient globals)
    - Services raise CrmError subclasses; HTTP mapping happens in api/
"""
