"""I/O schemas for the HTTP API, grouped by endpoint family."""
