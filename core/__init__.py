"""
Core module for shared infrastructure.

This module contains:
- Domain exceptions and value objects
- Cache and database adapters
- Middleware components
- Metrics and tracing setup
"""
