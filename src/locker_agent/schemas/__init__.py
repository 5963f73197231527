"""Backend wire schemas."""
