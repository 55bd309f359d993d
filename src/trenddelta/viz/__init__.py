"""Matplotlib helpers for trend delta plots."""
