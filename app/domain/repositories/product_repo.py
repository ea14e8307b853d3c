# app/domain/repositories/product_repo.py

from __future__ import annotations
import logging
from typing import List
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import ValidationError
from app.domain.models.product import ProductFeature

logger = logging.getLogger(__name__)

_PROJECTION = {
    "_id": 0,
    "product_id": 1,
    "name": 1,
    "category": 1,
    "price": 1,
    "rating": 1,
    "tags": 1,
    "description": 1,
}

class ProductRepo:
    """
    Catalog reader backed by the 'products' collection.
    Read-only: the engine never writes to the catalog.
    """

    def __init__(self, db: AsyncIOMotorDatabase, collection_name: str = "products"):
        self.col = db[collection_name]

    async def fetch_all_products(self) -> List[ProductFeature]:
        """
        Load the whole catalog. Documents that do not validate are logged and skipped.
        Returns an empty list for an empty catalog.
        """
        products: List[ProductFeature] = []
        async for doc in self.col.find({}, _PROJECTION):
            try:
                products.append(ProductFeature.model_validate(doc))
            except ValidationError as e:
                logger.warning("skipping invalid product doc product_id=%s: %s", doc.get("product_id"), e)
        logger.debug("catalog loaded products=%s", len(products))
        return products
