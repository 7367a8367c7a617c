"""Command-line interface for URA travel queries."""
