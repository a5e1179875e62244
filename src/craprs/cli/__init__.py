"""craprs CLI."""
