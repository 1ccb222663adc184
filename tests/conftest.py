from collections.abc import Generator
from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel

from lotledger import catalog
from lotledger.app import create_app
from lotledger.codes import CodeGenerator
from lotledger.config import Settings
from lotledger.database import init_database, make_engine

TEST_DATABASE_URL = "sqlite://"


class CountingCodes(CodeGenerator):
    """Predictable codes: BTCH-00000001, WO-000002, ..."""

    def __init__(self) -> None:
        super().__init__()
        self.issued = 0

    def token(self, length: int) -> str:
        self.issued += 1
        return str(self.issued).zfill(length)


@pytest.fixture(name="db_engine")
def db_engine_fixture() -> Generator[Any, None, None]:
    engine = make_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    init_database(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(name="session")
def session_fixture(db_engine) -> Generator[Session, None, None]:
    with Session(db_engine) as session:
        yield session


@pytest.fixture(name="codes")
def codes_fixture() -> CountingCodes:
    return CountingCodes()


@pytest.fixture(name="raw_type")
def raw_type_fixture(session: Session):
    return catalog.create_item_type(session, "raw", "Raw material")


@pytest.fixture(name="make_item")
def make_item_fixture(session: Session, raw_type, codes):
    def _make(name: str, unit: str = "pcs"):
        return catalog.create_item(session, name, raw_type.code, unit, codes=codes)

    return _make


@pytest.fixture(name="client")
def client_fixture(db_engine) -> Generator[TestClient, None, None]:
    settings = Settings(seed_demo_data=False, cors_origins=[])
    app = create_app(settings=settings, engine=db_engine)

    with TestClient(app) as client:
        yield client
