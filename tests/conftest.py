import pytest

from org_registry.config import DBConfig
from org_registry.database.database import make_engine, make_session_factory
from org_registry.database.db_init import initialize_db
from org_registry.repositories.sqlalchemy import SqlalchemyOwnerRepository, SqlalchemyReservationRepository
from org_registry.services.reservation_service import ReservationService

# ===================================================================
#  메모리 SQLite 기반 공용 Fixture
# ===================================================================

@pytest.fixture
def engine():
    """테스트마다 비어있는 메모리 SQLite 엔진을 생성합니다."""
    engine = make_engine(DBConfig(url="sqlite://"))
    initialize_db(engine)
    yield engine
    engine.dispose()

@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)

@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()

@pytest.fixture
def owner_repo(db_session) -> SqlalchemyOwnerRepository:
    return SqlalchemyOwnerRepository(db_session)

@pytest.fixture
def reservation_repo(db_session) -> SqlalchemyReservationRepository:
    return SqlalchemyReservationRepository(db_session)

@pytest.fixture
def sql_reservation_service(owner_repo, reservation_repo) -> ReservationService:
    """실제 SQLAlchemy 리포지토리를 주입한 ReservationService."""
    return ReservationService(owner_repo, reservation_repo)
