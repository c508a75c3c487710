"""Activity ledger and the streak metrics derived from it."""
