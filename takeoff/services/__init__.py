"""Service layer for the Takeoff backend."""
