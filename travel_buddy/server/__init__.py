"""
Travel Buddy Server Package.

This package contains the web server implementation for the Travel Buddy service.
It includes the API definition, the WebSocket channel, middleware, exception
handlers and the request-scoped services the endpoints depend on.

Subpackages:
    api: FastAPI route definitions and endpoint logic.
    core: Configuration and constants.
    exception_handlers: Uniform error responses.
    middleware: Request logging and timing.
    services: Authentication, rate limiting, uploads and live connections.
"""
