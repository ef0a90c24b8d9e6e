"""Derivation engine: path matching, history walking, classification and aggregation."""
