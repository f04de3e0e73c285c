"""Thread-based channels with join, unite and rate-limit disciplines, priority dividers and their inspection."""

__version__ = "0.1.0"