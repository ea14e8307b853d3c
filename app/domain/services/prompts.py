import json
from typing import Any, Dict, List, Sequence

from app.domain.models.product import ProductFeature
from app.domain.models.profile import PreferenceProfile
from app.domain.services.constants import (
    MAX_RECOMMENDATIONS,
    PROMPT_TOP_CATEGORIES,
    RELEVANCE_HIGH,
    RELEVANCE_LOW,
    RELEVANCE_MEDIUM,
)

def system_prompt() -> str:
    return (
        "You are a ranking model for PERSONALISED PRODUCT RECOMMENDATIONS based on purchase history. "
        "Return a strict JSON array only."
    )

def _compact_candidate(p: ProductFeature) -> Dict[str, Any]:
    """Reduce a candidate to the fields the LLM needs."""
    return {
        "id": p.product_id,
        "name": p.name,
        "category": p.category,
        "price": p.price,
        "rating": p.rating,
        "tags": list(p.tags),
    }

def _format_price(value: float) -> str:
    return f"${value:.2f}"

def build_recommendation_request(profile: PreferenceProfile, candidates: Sequence[ProductFeature]) -> str:
    """
    Single text request: user summary + candidate list + expected reply shape.
    """
    top = profile.top_categories(PROMPT_TOP_CATEGORIES)
    categories = ", ".join(f"{cat}({qty} purchases)" for cat, qty in top) or "none"

    price_range = profile.price_range
    if price_range.is_empty:
        price_line = "unknown"
    else:
        price_line = f"{_format_price(price_range.min)} to {_format_price(price_range.max)}"

    candidate_list: List[Dict[str, Any]] = [_compact_candidate(p) for p in candidates]
    candidates_json = json.dumps(candidate_list, ensure_ascii=False, separators=(",", ":"))

    output_format = (
        '[{"productId":"<candidate.id>","relevance":"' + RELEVANCE_HIGH + '",'
        '"explanation":"Matches user\'s category preference and price range"}]'
    )

    return (
        "USER PURCHASE HISTORY:\n"
        f"Categories: {categories}\n"
        f"Price Range: {price_line}\n"
        f"Average Rating: {profile.average_rating:.1f}\n"
        f"Total Rated Purchases: {profile.rated_count}\n\n"
        "CANDIDATES:\n"
        f"{candidates_json}\n\n"
        f"TASK: Recommend the top {MAX_RECOMMENDATIONS} CANDIDATES most relevant to this user, "
        "considering category preferences, price range and rating preferences.\n\n"
        "RULES:\n"
        "- Use ONLY ids from CANDIDATES\n"
        f"- At most {MAX_RECOMMENDATIONS} entries, most relevant first\n"
        f"- relevance: one of \"{RELEVANCE_HIGH}\", \"{RELEVANCE_MEDIUM}\", \"{RELEVANCE_LOW}\"\n"
        "- explanation: one short factual sentence\n"
        "- Format: strict JSON array, no prose, no code fences\n\n"
        "OUTPUT FORMAT: " + output_format
    )
