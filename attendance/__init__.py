"""Classroom attendance service with one-time code verification."""
