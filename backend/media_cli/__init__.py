"""Typer command line interface for the media cache."""
