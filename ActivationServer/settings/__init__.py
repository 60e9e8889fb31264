"""
Django settings module.

This package contains environment-specific settings:
- base.py: settings shared by every environment, including key material
- dev.py: local development
- test.py: pytest runs (in-memory SQLite, generated keys)
- prod.py: production
"""
