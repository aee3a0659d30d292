"""
Ledger Kernel

Shared foundation for the project amendment ledger:
- Typed exceptions with machine-readable codes
- Structured JSON logging
- Injectable clock and wire-value parsing
- SQLAlchemy declarative base and engine bootstrap
"""

__version__ = "0.1.0"
