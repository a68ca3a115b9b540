"""Stationery requisition and stock tracker."""

from .tracker import StationeryTracker

__all__ = ["StationeryTracker"]
