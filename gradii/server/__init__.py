"""
Gradii Server Package.

This package contains the web server implementation for the Gradii interview service.
It includes the API definition, configuration, dependencies and error handling.

Subpackages:
    api: FastAPI route definitions and endpoint logic.
    core: Server configuration and constants.
    services: FastAPI dependency providers.
    exception_handlers: Error to response translation.
    middleware: Request tracing and timing.
"""
