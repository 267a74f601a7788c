"""Reporting: JSON / CSV export of predictions."""
