"""Small formatting and protocol helpers."""
