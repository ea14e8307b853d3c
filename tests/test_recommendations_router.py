import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_engine
from app.core import lifespan as lifespan_module
from app.core.config import Settings
from app.core.errors import CatalogEmptyError, ConfigurationError
from app.domain.models.product import Recommendation
from app.main import app


class _StubEngine:
    def __init__(self, result=None, error=None):
        self.result = result or []
        self.error = error
        self.calls = []

    async def generate_recommendations(self, user_id, *, use_llm=True):
        self.calls.append((user_id, use_llm))
        if self.error:
            raise self.error
        return self.result


@pytest.fixture
def client_with():
    def _make(engine):
        app.dependency_overrides[get_engine] = lambda: engine
        return TestClient(app)
    yield _make
    app.dependency_overrides.clear()


def test_recommendations_ok(client_with):
    rec = Recommendation(
        product_id="c1", name="Cola", category="drinks", price=2.5, rating=4.5,
        confidence=0.91, reasons=["Matches your drinks category preference"],
    )
    engine = _StubEngine([rec])

    resp = client_with(engine).get("/recommendations/u1", params={"use_llm": "false"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["count"] == 1
    assert body["message"] == "Recommendations generated successfully"
    assert body["recommendations"][0]["product_id"] == "c1"
    assert body["recommendations"][0]["confidence"] == 0.91
    assert engine.calls == [("u1", False)]


def test_no_recommendations_is_still_ok(client_with):
    resp = client_with(_StubEngine([])).get("/recommendations/u1")

    assert resp.status_code == 200
    assert resp.json() == {"recommendations": [], "count": 0, "message": "No recommendations available for this user"}


def test_empty_catalog_is_404(client_with):
    engine = _StubEngine(error=CatalogEmptyError("No products available in the database", ["seed the catalog"]))

    resp = client_with(engine).get("/recommendations/u1")

    assert resp.status_code == 404
    assert resp.json()["detail"] == {"message": "No products available in the database", "errors": ["seed the catalog"]}


def test_engine_missing_is_503():
    resp = TestClient(app).get("/recommendations/u1")

    assert resp.status_code == 503


def test_startup_fails_without_openai_key(monkeypatch):
    monkeypatch.setattr(lifespan_module, "get_settings", lambda: Settings(OPENAI_API_KEY="", MONGO_URI=""))

    with pytest.raises(ConfigurationError):
        with TestClient(app):
            pass
