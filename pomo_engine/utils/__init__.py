"""
Utility functions module.

Time Semantics:
- Interval start times are timezone-aware; naive values are read as local time
- Calendar-day grouping (daily summaries) always uses the local timezone
- Durations are persisted as integer microseconds
"""
