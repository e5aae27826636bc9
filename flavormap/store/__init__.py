"""
Restaurant store.

Responsibilities:
- Load the processed restaurants table into memory on first use.
- Coerce numeric columns so views can filter and order on them.
- Report load problems as ``StoreFailure``.
"""
