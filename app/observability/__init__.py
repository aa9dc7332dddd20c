"""Lightweight observability helpers.

This package intentionally stays dependency-light: structlog JSON logging, named
spans carried in contextvars, and request IDs bound per HTTP request.
"""
