"""Backend client and workflow services."""
