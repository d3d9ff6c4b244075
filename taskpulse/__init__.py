"""taskpulse: to-do core with recurring tasks and completion analytics."""

__version__ = "0.1.0"
