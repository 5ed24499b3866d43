"""Snapshot domain: ownership model, lookup ports and the reconciliation core."""
