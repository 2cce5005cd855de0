"""Dependency wiring between the HTTP layer and the service layer."""
