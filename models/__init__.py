"""Records exchanged with the LedgerOS backend."""
