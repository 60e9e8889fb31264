"""
Products module - products, their managers and product-scoped access.

This module handles:
- Product and ProductManager entities
- The authorization matrix deciding who may read, mutate or administer a product
- Product and manager mutations (create, modify with main transfer, delete)
"""
