"""covreport - line coverage collection and report aggregation."""

__version__ = "0.1.0"
