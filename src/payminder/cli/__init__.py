"""Command-line interface for payminder."""
