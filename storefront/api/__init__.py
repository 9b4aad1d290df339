# storefront/api/__init__.py
from storefront.api.routers import carts, health, orders, payments, products

ROUTERS = [
    health.router,
    products.router,
    carts.router,
    orders.router,
    payments.router,
]
