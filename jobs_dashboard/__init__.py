"""jobs_dashboard package initializer.

This package contains the data pipeline behind the AI job-postings
dashboard.  Modules include record normalization, monthly aggregation,
timeline materialization, the scene state machine and the rendering
adapters.  See individual module docstrings for details.
"""
