"""
Pytest configuration and fixtures for catalog service tests.
"""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from catalog_service.health import create_health_app
from catalog_service.models import (
    Base,
    Chain,
    Ingredient,
    Product,
    Question,
    QuestionProduct,
    Tag,
)
from shared.config.constants import ItemType, ProductStatus, QuestionType


# SQLite in-memory database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Uses SQLite in-memory for isolation.
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory(db_session):
    """Session factory bound to the test database, for the dispatcher."""
    return TestingSessionLocal


@pytest.fixture
def events():
    """Event publisher double; assertions look at publish() calls."""
    publisher = MagicMock()
    publisher.publish.return_value = True
    return publisher


@pytest.fixture
def health_client(db_session):
    """Health probe client with a healthy database and a fake Redis."""
    redis = AsyncMock()
    redis.ping.return_value = True

    async def redis_factory():
        return redis

    app = create_health_app(session_factory=TestingSessionLocal, redis_factory=redis_factory)
    with TestClient(app) as test_client:
        test_client.redis = redis
        yield test_client


# =============================================================================
# Seed factories
# =============================================================================


@pytest.fixture
def make_product(db_session):
    """Create products: make_product("Burger", base_price="12.50")."""

    def _make(name: str, **fields) -> Product:
        product = Product(
            name=name,
            base_price=Decimal(str(fields.pop("base_price", "10.00"))),
            status=fields.pop("status", ProductStatus.ACTIVE),
            **fields,
        )
        db_session.add(product)
        db_session.commit()
        db_session.refresh(product)
        return product

    return _make


@pytest.fixture
def make_question(db_session):
    def _make(name: str, **fields) -> Question:
        question = Question(
            name=name,
            type=fields.pop("type", QuestionType.SINGLE_CHOICE),
            **fields,
        )
        db_session.add(question)
        db_session.commit()
        db_session.refresh(question)
        return question

    return _make


@pytest.fixture
def link(db_session):
    """
    Create a question-product link.

    link(question, product, ItemType.QUESTION): product asks question
    link(question, product, ItemType.ANSWER): product answers question
    """

    def _link(question: Question, product: Product, item_type: ItemType, position: int = 0):
        row = QuestionProduct(
            question_id=question.id,
            product_id=product.id,
            item_type=item_type,
            position=position,
        )
        db_session.add(row)
        db_session.commit()
        return row

    return _link


@pytest.fixture
def make_ingredient(db_session):
    def _make(name: str, unit: str = "g", **fields) -> Ingredient:
        ingredient = Ingredient(name=name, unit=unit, **fields)
        db_session.add(ingredient)
        db_session.commit()
        db_session.refresh(ingredient)
        return ingredient

    return _make


@pytest.fixture
def make_tag(db_session):
    def _make(name: str) -> Tag:
        tag = Tag(name=name)
        db_session.add(tag)
        db_session.commit()
        db_session.refresh(tag)
        return tag

    return _make


@pytest.fixture
def seed_chain(db_session):
    chain = Chain(name="Pardos", currency="PEN", tax_percent=18.0)
    db_session.add(chain)
    db_session.commit()
    db_session.refresh(chain)
    return chain


@pytest.fixture
def seed_product(make_product):
    return make_product("Burger", base_price="12.50", sku="BRG-001")
