"""Recipe suggestions that learn from what users pick and rate."""
