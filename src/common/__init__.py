"""Shared helpers used across tfmkit packages."""
