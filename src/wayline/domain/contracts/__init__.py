"""Contracts (protocols) between Wayline components."""
