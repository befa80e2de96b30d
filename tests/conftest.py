import os
import time
from typing import Optional

import pytest
import requests

# --- tests: stable environment before app.* is imported ---
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "INFO")
# In-memory SQLite unless a real database is provided.
os.environ.setdefault("DATABASE_URL", "sqlite://")

from fastapi.testclient import TestClient  # noqa: E402

from app.core.db import Base, get_engine  # noqa: E402
from app.main import app  # noqa: E402


@pytest.fixture()
def client():
    """TestClient on a freshly created schema."""
    engine = get_engine()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    with TestClient(app) as c:
        yield c
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def create_product(client):
    def _create(name: str = "Widget", price: float = 9.99, description: Optional[str] = None) -> dict:
        payload = {"name": name, "price": price}
        if description is not None:
            payload["description"] = description
        r = client.post("/products", json=payload)
        assert r.status_code == 201, r.text
        return r.json()["product"]

    return _create


# =========================
# Live service (optional)
# =========================
@pytest.fixture(scope="session")
def base_url() -> str:
    """
    Base URL of a running service (container/CI), e.g. http://localhost:8000.
    Live tests are skipped when PRODUCTS_BASE_URL is not set.
    """
    url = os.getenv("PRODUCTS_BASE_URL", "").strip()
    if not url:
        pytest.skip("PRODUCTS_BASE_URL not set; live service tests skipped")
    url = url.rstrip("/")

    deadline = time.time() + 60.0
    last: Optional[Exception] = None
    while time.time() < deadline:
        try:
            r = requests.get(f"{url}/health", timeout=3)
            if r.status_code == 200:
                return url
        except requests.RequestException as e:
            last = e
        time.sleep(1.0)

    raise RuntimeError(f"products-api not answering on {url}/health. Last error: {last}")
