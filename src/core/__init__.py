"""
Core domain models, mathematical primitives, and invariants.

Value objects, exact money rounding, error taxonomy and JSON contracts,
independent of transport and storage.
"""
