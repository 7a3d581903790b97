"""Utility helpers for exifbridge."""
