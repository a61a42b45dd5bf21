"""
Data layer for FootyCast.

Includes:
- Stored matches schema and validation (`schema`)
- Fixture retrieval from the data providers (`fixtures`)
- File-backed persistence of matches and predictions (`store`)
"""
