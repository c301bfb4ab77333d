"""Record store gateway and its backends."""
