from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

class LineItem(BaseModel):
    product_id: str
    name: Optional[str] = None
    category: str
    price: float = Field(ge=0)
    quantity: int = Field(ge=0)
    rating: Optional[float] = Field(default=None, ge=1, le=5)

    model_config = {"frozen": True}

class PurchaseRecord(BaseModel):
    """
    One historical order. Owned by the purchase-history store.

    `unscored_product_ids` holds ids of stored line items that failed validation:
    they were still bought, so they stay excluded from recommendations, but they
    do not feed the preference profile.
    """
    user_id: str
    order_id: Optional[str] = None
    items: List[LineItem] = []
    unscored_product_ids: List[str] = []
    created_at: Optional[datetime] = None

    model_config = {"frozen": True}
