"""Raipur Smart Connect -- abuse mitigation for civic complaint submission."""

__version__ = "0.1.0"
