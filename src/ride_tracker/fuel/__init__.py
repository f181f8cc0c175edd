"""Fuel level tracking and range estimation."""

from ride_tracker.fuel.model import FuelModel, FuelState

__all__ = ["FuelModel", "FuelState"]
