"""
Scheduled jobs for FootyCast.

- `predict_job` fetches fixtures and scores pending ones (also a CLI).
- `scheduler` runs both jobs on fixed intervals.
"""
