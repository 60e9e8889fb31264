from products.infrastructure.models import Product, ProductManager  # noqa: F401
