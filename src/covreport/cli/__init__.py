"""covreport command line interface."""
