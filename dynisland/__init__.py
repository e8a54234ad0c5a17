"""Notch-anchored desktop panel with a periodic system-metrics sampler."""
