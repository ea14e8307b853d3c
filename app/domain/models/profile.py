from __future__ import annotations
import math
from typing import Dict, List, Tuple
from pydantic import BaseModel

class PriceRange(BaseModel):
    # No purchases -> min=+inf, max=0
    min: float = math.inf
    max: float = 0.0

    model_config = {"frozen": True}

    @property
    def is_empty(self) -> bool:
        return self.min > self.max

    @property
    def midpoint(self) -> float:
        return (self.min + self.max) / 2

    @property
    def width(self) -> float:
        return self.max - self.min

    def contains(self, price: float) -> bool:
        return self.min <= price <= self.max

class PreferenceProfile(BaseModel):
    """
    Per-request summary of a user's purchase behaviour.

    - categories: category -> accumulated purchased quantity
    - price_range: observed unit-price range
    - average_rating: mean over rated line items only (0 when none rated)
    - rated_count: number of rated line items
    """
    categories: Dict[str, int] = {}
    price_range: PriceRange = PriceRange()
    average_rating: float = 0.0
    rated_count: int = 0

    model_config = {"frozen": True}

    @property
    def total_quantity(self) -> int:
        return sum(self.categories.values())

    def top_categories(self, n: int = 3) -> List[Tuple[str, int]]:
        return sorted(self.categories.items(), key=lambda kv: kv[1], reverse=True)[:n]
