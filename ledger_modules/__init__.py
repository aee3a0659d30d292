"""
Ledger Modules.

Thin orchestration layers over the Ledger Kernel and Engines.
Each module contains:
- Domain models (the nouns)
- ORM persistence models and a repository interface
- Configuration schema
- A service facade owning the transaction boundary

Modules:
- Project: projects, their amendments, and the derived ledger summary

Actual calculation logic lives in ``ledger_engines``.
"""
