"""Utility helpers for the sieve CLI."""
