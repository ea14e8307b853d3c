import pytest

from app.core.errors import CatalogEmptyError
from app.domain.services.candidates_svc import select_candidates
from factories import product


def test_purchased_products_are_excluded_in_catalog_order():
    catalog = [product("a"), product("b"), product("c"), product("d")]

    out = select_candidates(catalog, {"b", "d", "zz"})

    assert [p.product_id for p in out] == ["a", "c"]


def test_empty_catalog_raises():
    with pytest.raises(CatalogEmptyError) as exc:
        select_candidates([], {"a"})
    assert exc.value.errors


def test_everything_bought_is_an_empty_result():
    assert select_candidates([product("a")], ["a"]) == []
