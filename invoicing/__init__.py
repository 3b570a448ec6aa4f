"""Invoice numbering service."""
