"""Companion session, configuration and storage."""
