# storefront/data/seed.py
from decimal import Decimal

from storefront.data.database import SessionLocal, init_db
from storefront.data.models.product import ProductModel
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

CATALOG = [
    {"name": "Heirloom Tomato Seeds", "category": "seeds", "price": Decimal("4.99"),
     "image_url": "/images/tomato-seeds.jpg", "description": "Mixed heirloom varieties, 50 seeds."},
    {"name": "Organic Potting Mix", "category": "soil", "price": Decimal("18.50"),
     "image_url": "/images/potting-mix.jpg", "description": "20 L bag, peat free."},
    {"name": "Raised Bed Kit", "category": "structures", "price": Decimal("129.00"),
     "image_url": "/images/raised-bed.jpg", "description": "Cedar, 120 x 60 cm."},
    {"name": "Hand Trowel", "category": "tools", "price": Decimal("12.75"),
     "image_url": "/images/trowel.jpg", "description": "Stainless steel blade, ash handle."},
    {"name": "Drip Irrigation Set", "category": "watering", "price": Decimal("49.90"),
     "image_url": "/images/drip-set.jpg", "description": "Covers up to 10 m of bed."},
]


def seed(db=None) -> int:
    """Loads the starter catalog into an empty products table. Returns rows added."""
    own_session = db is None
    db = db or SessionLocal()
    try:
        # only seed if empty
        if db.query(ProductModel).first():
            return 0
        db.add_all(ProductModel(**row) for row in CATALOG)
        db.commit()
        logger.info(f"Seeded {len(CATALOG)} products")
        return len(CATALOG)
    finally:
        if own_session:
            db.close()


if __name__ == "__main__":
    init_db()
    seed()
