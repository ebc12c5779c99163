"""Alert surface."""

from squawker.infrastructure.alerts.alert_board import AlertBoard

__all__ = ["AlertBoard"]
