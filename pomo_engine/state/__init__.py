"""
Interval state machine: data models, category scheduling and the ticking timer.
"""
