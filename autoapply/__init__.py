"""LinkedIn Easy Apply automation."""
