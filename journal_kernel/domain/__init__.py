"""Pure domain core: statuses, values, clock, status derivation, ledger math."""
