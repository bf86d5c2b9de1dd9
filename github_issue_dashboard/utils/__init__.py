"""Shared helpers for logging and date handling."""
