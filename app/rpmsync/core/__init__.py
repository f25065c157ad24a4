"""Core reconciliation logic for rpmsync."""
