"""Backup auditor: verify backed-up media against a photo library and review the gaps."""

__version__ = "0.1.0"
