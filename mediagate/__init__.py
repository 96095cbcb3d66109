"""Multi-user gateway for a personal media app."""
