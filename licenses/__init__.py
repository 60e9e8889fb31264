"""
Licenses module - license types and product features.

This module handles:
- LicenseType entity (a named tier within a product)
- ProductFeature entity (a product capability identified by an immutable code)
- The replace-all association between license types and features
"""
