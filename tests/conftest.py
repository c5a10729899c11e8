import pytest
from fastapi.testclient import TestClient

from product_service.api import deps
from product_service.main import app

from fakes import InMemoryCategoryRepo, InMemoryInteractionRepo, InMemoryProductRepo


@pytest.fixture
def products():
    return InMemoryProductRepo()


@pytest.fixture
def categories():
    return InMemoryCategoryRepo()


@pytest.fixture
def interactions(products):
    return InMemoryInteractionRepo(products)


@pytest.fixture
def client(products, categories, interactions):
    app.dependency_overrides[deps.product_repo] = lambda: products
    app.dependency_overrides[deps.category_repo] = lambda: categories
    app.dependency_overrides[deps.interaction_repo] = lambda: interactions
    app.dependency_overrides[deps.redis_dep] = lambda: None
    yield TestClient(app)
    app.dependency_overrides.clear()
