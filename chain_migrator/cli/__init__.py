"""Command-line interface for the chain state migration tool."""
