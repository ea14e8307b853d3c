# app/domain/services/decoder.py
"""
Tolerant decoder for the LLM reply.

The reply is free text from a generative model. It is decoded into either
DecodedSuggestions (validated, known-id entries) or DecodeFailure; callers
branch on the result type, nothing here raises for bad input.
"""
from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Collection, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

# =============================================================================
#                               VALIDATION SCHEMA
# =============================================================================

class AISuggestion(BaseModel):
    """
    One entry of the expected reply:
      {"productId": "<candidate.id>", "relevance": "high|medium|low", "explanation": "..."}
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    product_id: str = Field(..., alias="productId", min_length=1)
    relevance: str = "medium"
    explanation: Optional[str] = None

    @field_validator("product_id", mode="before")
    @classmethod
    def _id_as_str(cls, v):
        # models sometimes echo numeric ids
        return str(v) if isinstance(v, (int, float)) and not isinstance(v, bool) else v

    @field_validator("relevance", mode="before")
    @classmethod
    def _normalise_relevance(cls, v):
        return str(v).strip().lower() if v is not None else "medium"

# =============================================================================
#                               RESULT TYPES
# =============================================================================

@dataclass(frozen=True)
class DecodedSuggestions:
    entries: List[AISuggestion] = field(default_factory=list)

@dataclass(frozen=True)
class DecodeFailure:
    reason: str

DecodeResult = Union[DecodedSuggestions, DecodeFailure]

# Regex to strip code fences (``` or ```json) from LLM output
_CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.MULTILINE)
# First '[' up to the last ']'
_ARRAY_RE = re.compile(r"\[[\s\S]*\]")

def _strip_fences(s: str) -> str:
    """Remove ``` or ```json fences the LLM might add."""
    return _CODE_FENCE_RE.sub("", s).strip()

def _load_list(text: str) -> Optional[List[Any]]:
    try:
        parsed = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return None
    return parsed if isinstance(parsed, list) else None

def _extract_list(raw: str) -> Optional[List[Any]]:
    """Whole reply first, then the first bracketed substring."""
    parsed = _load_list(_strip_fences(raw))
    if parsed is not None:
        return parsed
    match = _ARRAY_RE.search(raw)
    if match:
        logger.debug("LLM reply is not a bare JSON array, trying embedded array")
        return _load_list(match.group(0))
    return None

def decode_suggestions(raw: Optional[str], known_ids: Collection[str]) -> DecodeResult:
    """
    Decode the raw LLM reply against the set of candidate ids.

    Malformed elements, unknown ids (hallucinations) and duplicate ids are
    dropped. No usable entry left counts as a failure.
    """
    if raw is None or not raw.strip():
        return DecodeFailure("empty reply")

    items = _extract_list(raw)
    if items is None:
        logger.debug(f"LLM reply not parseable: {raw[:300]}{'…' if len(raw) > 300 else ''}")
        return DecodeFailure("reply is not a JSON array")

    known = set(known_ids)
    seen = set()
    entries: List[AISuggestion] = []
    dropped_invalid = dropped_unknown = 0
    for item in items:
        try:
            suggestion = AISuggestion.model_validate(item)
        except ValidationError:
            dropped_invalid += 1
            continue
        if suggestion.product_id not in known:
            dropped_unknown += 1
            continue
        if suggestion.product_id in seen:
            continue
        seen.add(suggestion.product_id)
        entries.append(suggestion)

    logger.debug(
        "decoded LLM reply items=%s kept=%s invalid=%s unknown=%s",
        len(items), len(entries), dropped_invalid, dropped_unknown,
    )
    if not entries:
        return DecodeFailure("no usable entries")
    return DecodedSuggestions(entries=entries)
