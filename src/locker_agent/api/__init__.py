"""HTTP layer: routes, dependencies and templates."""
