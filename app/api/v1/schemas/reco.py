# api/v1/schemas/reco.py
from pydantic import BaseModel, Field
from typing import List

MSG_RECOMMENDATIONS_OK = "Recommendations generated successfully"
MSG_NO_RECOMMENDATIONS = "No recommendations available for this user"

class RecommendationOut(BaseModel):
    product_id: str
    name: str
    category: str
    price: float
    rating: float
    confidence: float
    reasons: List[str] = Field(default_factory=list)

class RecommendationsOut(BaseModel):
    recommendations: List[RecommendationOut]
    count: int
    message: str

class ErrorDetail(BaseModel):
    message: str
    errors: List[str] = Field(default_factory=list)
