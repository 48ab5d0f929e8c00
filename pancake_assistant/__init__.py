"""Pancake cooking assistant with per-recipe cook-time learning."""

__version__ = "0.1.0"
