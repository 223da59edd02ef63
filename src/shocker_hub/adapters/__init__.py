"""Adapters for configuration, storage, external APIs and the web surface."""
