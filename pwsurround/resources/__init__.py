"""Packaged data files: default settings, HRTF descriptions, sink template."""
