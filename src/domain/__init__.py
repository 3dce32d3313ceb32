"""Domain models and rules for the currency ledger.

This package holds the in-memory ledger engine, the static rate table and
the money helpers. It knows nothing about storage so that business rules
and tests can evolve without persistence coupling.
"""

__all__ = [
    "base_types",
    "errors",
    "ledger",
    "money",
    "rates",
]
