"""Command-line interface for rpmsync.

This package contains the Typer application invoked from RPM scriptlets.
"""
