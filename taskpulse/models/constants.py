"""Constants for taskpulse.

This module centralizes magic numbers and default values used throughout the application.
"""

from taskpulse.models.task import Priority


# Task defaults
DEFAULT_PRIORITY = Priority.LOW
DEFAULT_RECURRING_PRIORITY = Priority.MEDIUM

# Recurrence
MAX_RECURRING_OCCURRENCES = 100  # Hard ceiling per expansion, even with a larger max_occurrences

# Analytics
DEFAULT_SUMMARY_DAYS = 7
DEFAULT_SUMMARY_WEEKS = 4
MAX_SUMMARY_DAYS = 366
MAX_SUMMARY_WEEKS = 104
