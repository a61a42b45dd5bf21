"""
FootyCast: daily football fixture predictions.

- `scoring` turns two team profiles and their head-to-head record into a
  match prediction (the only part with actual modelling logic).
- `data` fetches fixtures from the providers and persists matches/predictions.
- `features` derives team profiles and head-to-head records from stored matches.
- `jobs` wires everything into the scheduled fetch/predict jobs.
- `api` and `ui` expose the stored predictions.
"""

__version__ = "0.1.0"
