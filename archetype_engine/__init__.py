"""Conflict archetype classification engine."""
