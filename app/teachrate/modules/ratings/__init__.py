"""Rating ledger: star ratings with comments and per-teacher averages."""
