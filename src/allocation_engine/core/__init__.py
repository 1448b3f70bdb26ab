"""Shared primitives (errors, logging, hashing) for the allocation engine."""
