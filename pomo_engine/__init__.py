"""
Pomo Engine - Pomodoro Interval Engine

Drives work/break intervals through a persisted state machine, advancing
progress one second at a time and deciding which category of interval comes
next from the recorded history.
"""

__version__ = "0.1.0"
__author__ = "Pomo Engine Team"
