"""Data room access control service."""
