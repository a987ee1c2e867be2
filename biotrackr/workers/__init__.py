"""Background workers and scheduled entrypoints."""
