"""Application layer: scan, reconcile and orchestrate."""
