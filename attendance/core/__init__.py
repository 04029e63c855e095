"""Core configuration, security and utilities."""
