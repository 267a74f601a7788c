"""Deterministic scoring and selection engine for football market picks."""

__version__ = "0.1.0"
