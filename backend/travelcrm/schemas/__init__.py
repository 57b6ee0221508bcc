"""Pydantic Schemas — request validation at the API boundary.

Invariants:
    - Schemas validate at system boundary; repositories receive already-valid data
    - Wire names are camelCase (aliases); Python names match ORM columns
    - Fields the server owns (id, createdBy, createdAt, updatedAt) are not
      declared, so client-supplied values are silently ignored

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
