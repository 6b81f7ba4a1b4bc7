"""
Command Line Interface Package

Command Structure:
- splitsync: Main entry point with utility commands (version, config)
- splitsync sync: Run the YNAB -> Splitwise sync (--dry-run to preview)
"""
