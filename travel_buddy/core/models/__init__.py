"""Core models and schemas: domain enums and API I/O models."""
