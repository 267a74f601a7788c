"""Fixture selection: decide which events are worth running through the engine."""
