"""Shared helpers for the genesis tooling."""
