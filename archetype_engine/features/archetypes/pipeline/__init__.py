"""
Aggregation and classification pipeline for the archetype engine.
"""
