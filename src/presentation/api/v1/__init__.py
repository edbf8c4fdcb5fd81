"""Version 1 of the ledger API."""
