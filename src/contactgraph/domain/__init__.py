"""Domain layer: contact records, store ports and the reconciliation core."""
