"""Core types, context helpers and strategy registries."""
