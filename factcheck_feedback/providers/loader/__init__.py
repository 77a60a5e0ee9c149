"""Per-request document loaders."""
