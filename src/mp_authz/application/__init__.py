"""Application layer – permission cache and authorization engine."""
