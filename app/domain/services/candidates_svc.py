import logging
from typing import Iterable, List, Sequence

from app.core.errors import CatalogEmptyError
from app.domain.models.product import ProductFeature

logger = logging.getLogger(__name__)


def select_candidates(
    catalog: Sequence[ProductFeature],
    purchased_ids: Iterable[str],
) -> List[ProductFeature]:
    """
    Catalog entries the user has not bought yet, in catalog order.

    An empty catalog is a data-seeding problem and raises CatalogEmptyError;
    a user who already bought everything just gets an empty list.
    """
    if not catalog:
        raise CatalogEmptyError(
            "No products available in the database",
            ["Please add some products before generating recommendations"],
        )
    purchased = set(purchased_ids)
    candidates = [p for p in catalog if p.product_id not in purchased]
    logger.debug("candidates catalog=%s purchased=%s kept=%s", len(catalog), len(purchased), len(candidates))
    return candidates
