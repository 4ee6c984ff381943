"""Services Layer - entity writers that sequence record store calls.

Invariants:
    - Writers depend on the RecordStore protocol, never on SQLAlchemy
    - Validation runs before the first store call of every mutating operation
    - Multi-step writes register a compensating action after each successful write
"""
