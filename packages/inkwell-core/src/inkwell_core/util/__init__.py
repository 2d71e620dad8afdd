"""Shared utilities for inkwell."""
