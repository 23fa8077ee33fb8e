import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from recipe_extractor.app.api.deps import get_db_session, get_extraction_service
from recipe_extractor.app.core.config import get_settings
from recipe_extractor.app.db import models  # noqa: F401
from recipe_extractor.app.db.base import Base
from recipe_extractor.app.main import create_app
from recipe_extractor.app.schemas.recipe import RecipeMethod
from recipe_extractor.app.services.url_parsing.html_fetcher import validate_url
from recipe_extractor.app.services.url_parsing.markdown import render_markdown
from recipe_extractor.app.services.url_parsing.recipe_builder import recipe_from_markdown


@pytest.fixture(scope="session")
def engine():
    engine = create_engine("sqlite+pysqlite:///:memory:", connect_args={"check_same_thread": False}, future=True)
    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture
def db_session(engine):
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(bind=connection, autocommit=False, autoflush=False, future=True)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
        transaction.rollback()
        connection.close()


@pytest.fixture
def session_factory(engine):
    connection = engine.connect()
    transaction = connection.begin()
    try:
        yield sessionmaker(bind=connection, autocommit=False, autoflush=False, future=True)
    finally:
        transaction.rollback()
        connection.close()


class StubExtractionService:
    """Records calls and answers with a fixed recipe."""

    def __init__(self):
        self.calls = []

    async def extract(self, url, variant, strategy):
        target = validate_url(url)
        self.calls.append((target, variant, strategy))
        return recipe_from_markdown(
            render_markdown("Soup", ["1 cup water"], ["Boil the water."]), RecipeMethod.DEEPSEEK, url=target
        )


@pytest.fixture
def extraction_service():
    return StubExtractionService()


@pytest.fixture
def app(db_session, extraction_service):
    app = create_app()

    def override_db():
        yield db_session

    app.dependency_overrides[get_db_session] = override_db
    app.dependency_overrides[get_extraction_service] = lambda: extraction_service
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def auth_settings():
    return get_settings()


def make_token(user_id: int, email: str, settings) -> str:
    payload = {"sub": str(user_id), "email": email}
    return jwt.encode(payload, settings.auth_secret_key, algorithm=settings.auth_algorithm)


@pytest.fixture
def user_token(auth_settings):
    return make_token(1, "user1@example.com", auth_settings)


@pytest.fixture
def other_user_token(auth_settings):
    return make_token(2, "user2@example.com", auth_settings)
