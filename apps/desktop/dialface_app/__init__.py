"""Desktop host for dialface: CLI and preview window."""
