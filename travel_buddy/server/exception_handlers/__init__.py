"""
Exception handlers for the Travel Buddy server.

This package contains the handlers that turn domain errors and unhandled
exceptions into JSON responses, and a setup function to register them with
the FastAPI application.
"""

from .global_handler import global_exception_handler, setup_exception_handlers, travel_buddy_error_handler

__all__ = ["global_exception_handler", "setup_exception_handlers", "travel_buddy_error_handler"]
