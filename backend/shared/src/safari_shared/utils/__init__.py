"""Utility helpers for the safari booking engine."""
