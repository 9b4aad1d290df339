# storefront/services/catalog_service.py
from decimal import Decimal
from typing import Dict, Iterable, List, Tuple

from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.domain.errors import NotFoundError
from storefront.repos.product_repo import ProductRepo


class CatalogService:
    """Name / price lookup for products. Read only."""

    def __init__(self, db: Session):
        self.repo = ProductRepo(db)

    def list_products(self) -> List[ProductModel]:
        return self.repo.list_products()

    def get_product(self, product_id: int) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found.")
        return product

    def get_price(self, product_id: int) -> Tuple[str, Decimal]:
        product = self.get_product(product_id)
        return product.name, Decimal(product.price)

    def get_prices(self, product_ids: Iterable[int]) -> Dict[int, Tuple[str, Decimal]]:
        ids = list(product_ids)
        products = self.repo.get_products(ids)

        missing = [pid for pid in ids if pid not in products]
        if missing:
            raise NotFoundError(f"Product {missing[0]} not found.")

        return {pid: (p.name, Decimal(p.price)) for pid, p in products.items()}
