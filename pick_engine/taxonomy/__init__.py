"""Closed vocabularies shared by models, engine, and settlement."""
