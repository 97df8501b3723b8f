"""
Core domain models, integer arithmetic primitives, stores and contracts.

This module contains the foundational building blocks that are independent
of external systems (pool execution engine, price feeds, storage, etc.).
"""
