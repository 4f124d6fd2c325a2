"""Lodge availability form backend: validation, payload mapping and rates lookup."""
