"""Clients for external services: Redis and the Piston code sandbox."""
