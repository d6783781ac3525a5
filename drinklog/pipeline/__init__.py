"""
Data pipelines feeding the ledger database.

Modules:
    - txt_import: Hand-written drinks log -> database
"""
