"""Pydantic Schemas - request body shapes for the question and topic endpoints.

Invariants:
    - Schemas only enforce JSON types; required-field and enumeration rules live
      in core/validate_payload.py so they run in a fixed order with fixed messages
    - Unknown keys are ignored

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
