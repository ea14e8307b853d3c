from pydantic import BaseModel, Field, field_validator
from typing import Optional, List

class ProductFeature(BaseModel):
    """Catalog entry as seen by the engine (read-only)."""
    product_id: str
    name: str
    category: str
    price: float = Field(ge=0)
    rating: float = Field(default=0.0, ge=0, le=5)
    tags: List[str] = []
    description: Optional[str] = None

    model_config = {"frozen": True}  # immuable = safe

    @field_validator("rating", mode="before")
    @classmethod
    def _unrated_is_zero(cls, v):
        return 0.0 if v is None else v

    @field_validator("tags", mode="before")
    @classmethod
    def _no_tags_is_empty(cls, v):
        return [] if v is None else v

class Recommendation(BaseModel):
    product_id: str
    name: str
    category: str
    price: float
    rating: float
    confidence: float = Field(ge=0.5, le=1.0)
    reasons: List[str] = []
    model_config = {"frozen": True} # immuable = safe
