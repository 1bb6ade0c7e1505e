"""Product storage backend."""
import logging
from abc import ABC, abstractmethod
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from app.models.product import Product

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when a storage operation cannot be completed."""


class ProductStore(ABC):
    """Capability interface for product persistence."""

    @abstractmethod
    def create_product(self, product: Product) -> Product:
        """
        Insert a product and populate its id and created timestamp.

        Args:
            product: Product with name, price and available set

        Returns:
            The same product, with storage-assigned fields filled in

        Raises:
            StorageError: If the insert fails
        """

    @abstractmethod
    def get_products(self) -> List[Product]:
        """
        Fetch every stored product, in no particular order.

        Raises:
            StorageError: If the query fails
        """


class SQLProductStore(ProductStore):
    """ProductStore backed by a SQL database through SQLAlchemy."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def create_product(self, product: Product) -> Product:
        with self._session_factory() as db:
            try:
                db.add(product)
                db.commit()
                db.refresh(product)
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"❌ Failed to insert product '{product.name}': {e}")
                raise StorageError(f"error inserting product: {e}") from e
            db.expunge(product)

        logger.info(f"✅ Created product id={product.id}")
        return product

    def get_products(self) -> List[Product]:
        with self._session_factory() as db:
            try:
                products = list(db.scalars(select(Product)).all())
            except SQLAlchemyError as e:
                logger.error(f"❌ Failed to fetch products: {e}")
                raise StorageError(f"error fetching products: {e}") from e

        logger.debug(f"Fetched {len(products)} products")
        return products
