"""Tutoring assistant backend."""
