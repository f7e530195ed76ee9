# ABOUTME: Cross-cutting utilities and shared infrastructure
# ABOUTME: Supporting services: logging and upstream HTTP fetching

"""
Utils Layer: Shared infrastructure and cross-cutting concerns

This layer provides:
- Logging configuration and structured loggers
- The HTTP client used for every upstream page fetch

Data Flow: Supporting services for the engine and transformers
"""

from . import logging

__all__ = [
    "logging",
]
