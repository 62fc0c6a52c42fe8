"""Adapters – concrete infrastructure implementations of kernel ports."""
