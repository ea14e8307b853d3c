# app/domain/repositories/purchase_history_repo.py

from __future__ import annotations
import logging
from typing import Any, Dict, List
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import ValidationError
from app.domain.models.purchase import LineItem, PurchaseRecord

logger = logging.getLogger(__name__)


def _raw_product_id(raw: Any) -> str | None:
    pid = raw.get("product_id") if isinstance(raw, dict) else None
    return str(pid) if pid else None


class PurchaseHistoryRepo:
    """
    Purchase-history reader backed by the 'purchase_history' collection:
      { user_id, order_id, items: [{product_id, name, category, price, quantity, rating}], created_at }
    """

    def __init__(self, db: AsyncIOMotorDatabase, collection_name: str = "purchase_history"):
        self.col = db[collection_name]

    async def fetch_history(self, user_id: str) -> List[PurchaseRecord]:
        """
        All orders of `user_id`, newest first. Unknown users get an empty list.

        Line items are validated one by one: a bad item is dropped from the
        profile inputs but its product_id is kept as unscored, so it is never
        recommended back.
        """
        cursor = self.col.find({"user_id": user_id}, {"_id": 0}).sort("created_at", -1)
        records: List[PurchaseRecord] = []
        async for doc in cursor:
            records.append(self._to_record(user_id, doc))
        logger.debug("history loaded user_id=%s records=%s", user_id, len(records))
        return records

    def _to_record(self, user_id: str, doc: Dict[str, Any]) -> PurchaseRecord:
        order_id = doc.get("order_id")
        raw_items = doc.get("items") or []
        items: List[LineItem] = []
        unscored: List[str] = []
        for raw in raw_items:
            try:
                items.append(LineItem.model_validate(raw))
            except ValidationError as e:
                logger.warning("skipping invalid line item user_id=%s order_id=%s: %s", user_id, order_id, e)
                pid = _raw_product_id(raw)
                if pid:
                    unscored.append(pid)
        try:
            return PurchaseRecord.model_validate({**doc, "items": items, "unscored_product_ids": unscored})
        except ValidationError as e:
            # order-level fields are broken; keep only what was bought
            logger.warning("invalid purchase doc user_id=%s order_id=%s: %s", user_id, order_id, e)
            bought = [pid for pid in map(_raw_product_id, raw_items) if pid]
            return PurchaseRecord(user_id=user_id, unscored_product_ids=bought)
