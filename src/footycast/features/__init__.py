"""
Scoring inputs for FootyCast.

- `profile_builder` derives team profiles and head-to-head records from
  stored finished matches.
"""
