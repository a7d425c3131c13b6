"""Scanning, codec and file engines."""
