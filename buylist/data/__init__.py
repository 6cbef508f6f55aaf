"""Bundled fallback datasets."""
