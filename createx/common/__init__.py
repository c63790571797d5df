"""Shared primitives: hashing, RLP, types, errors and configuration."""
