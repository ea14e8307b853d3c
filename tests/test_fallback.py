from app.domain.services.fallback import assemble, backfill, fallback_rank, to_recommendation
from app.domain.services.profile_svc import build_preference_profile, category_weights
from factories import drinks_history, product, ten_candidates

PROFILE = build_preference_profile(drinks_history())
WEIGHTS = category_weights(PROFILE)


def test_fallback_keeps_bought_categories_within_price_range():
    out = fallback_rank(PROFILE, ten_candidates(), WEIGHTS)

    assert {r.product_id for r in out} == {"c0", "c1", "c2", "c8", "c9"}
    confidences = [r.confidence for r in out]
    assert confidences == sorted(confidences, reverse=True)


def test_fallback_price_bounds_are_inclusive():
    out = fallback_rank(PROFILE, [product("lo", "drinks", 1.0), product("hi", "snacks", 4.0), product("over", "drinks", 4.01)], WEIGHTS)

    assert {r.product_id for r in out} == {"lo", "hi"}


def test_fallback_equal_confidence_keeps_candidate_order():
    weights = {"drinks": 5, "snacks": 5}
    out = fallback_rank(PROFILE, [product("s", "snacks", 2.5), product("d", "drinks", 2.5)], weights)

    assert out[0].confidence == out[1].confidence
    assert [r.product_id for r in out] == ["s", "d"]


def test_fallback_prefers_heavier_category():
    out = fallback_rank(PROFILE, [product("s", "snacks", 2.5), product("d", "drinks", 2.5)], WEIGHTS)

    assert [r.product_id for r in out] == ["d", "s"]


def test_fallback_caps_at_five():
    many = [product(f"d{i}", "drinks", 1.0 + i * 0.25) for i in range(12)]

    assert len(fallback_rank(PROFILE, many, WEIGHTS)) == 5


def test_backfill_pads_with_best_unselected_candidates():
    selected = [to_recommendation(product("c8", "drinks", 2.5), PROFILE, WEIGHTS, confidence=1.0)]
    out = backfill(selected, ten_candidates(), PROFILE, WEIGHTS)

    assert [r.product_id for r in out] == ["c8", "c0", "c9", "c1", "c2"]


def test_backfill_leaves_full_lists_alone():
    full = [to_recommendation(p, PROFILE, WEIGHTS) for p in ten_candidates()[:5]]

    assert backfill(full, ten_candidates(), PROFILE, WEIGHTS) == full


def test_assemble_dedups_sorts_and_caps():
    a = to_recommendation(product("a"), PROFILE, WEIGHTS, confidence=0.6)
    b = to_recommendation(product("b"), PROFILE, WEIGHTS, confidence=0.9)
    dup = to_recommendation(product("a"), PROFILE, WEIGHTS, confidence=0.99)
    rest = [to_recommendation(product(f"r{i}"), PROFILE, WEIGHTS, confidence=0.7) for i in range(5)]

    out = assemble([a, b, dup, *rest])

    assert len(out) == 5
    assert [r.product_id for r in out][:1] == ["b"]
    assert "a" not in [r.product_id for r in out]
    assert len({r.product_id for r in out}) == 5
