"""Command-line interface for MemoClaw."""
