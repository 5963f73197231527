"""Smart Locker Agent console."""
