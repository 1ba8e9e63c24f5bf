"""Bundled challenge catalog."""
