"""Adapters to external systems: database, embedding provider, notifications."""
