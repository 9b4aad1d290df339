from sqlalchemy import Column, Integer, String, Numeric, Text

from storefront.data.database import Base


class ProductModel(Base):
    __tablename__ = "products_s"

    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(100), nullable=True)

    price = Column(Numeric(10, 2), nullable=False)
    image_url = Column(String, nullable=True)
