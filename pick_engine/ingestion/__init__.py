"""Payload ingestion: JSON bundles -> validated engine input models."""
