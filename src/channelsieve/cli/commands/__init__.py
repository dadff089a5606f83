"""
CLI command modules.

Each module defines a Typer app or command function that main.py registers.
"""
