"""Outbound gateway protocols."""
