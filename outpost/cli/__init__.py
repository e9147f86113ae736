"""Outpost command-line interface (Typer + Rich)."""
