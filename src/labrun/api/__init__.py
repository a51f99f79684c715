"""labrun REST API."""
