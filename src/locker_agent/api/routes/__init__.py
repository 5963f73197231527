"""Route group exports."""

from . import couriers, health, intake, lockers, shipments

__all__ = ["intake", "couriers", "lockers", "shipments", "health"]
