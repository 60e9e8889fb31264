"""
Core module for shared domain infrastructure.

This module contains:
- Domain exceptions and value objects (identities, enums, pagination)
- The transaction helper coupling mutations to their audit record
- Middleware components (actor resolution, observability, metrics)
- Health endpoints and management commands
"""
