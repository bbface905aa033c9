"""JobPsych / HireDesk AI assistant API."""

__version__ = "1.0.0"
