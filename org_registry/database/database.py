from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from org_registry.config import DBConfig

# 모든 모델 클래스가 상속받을 Base 클래스
Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def make_engine(db_config: DBConfig) -> Engine:
    """
    설정에 맞는 SQLAlchemy 엔진을 생성합니다.

    SQLite인 경우 스레드 공유를 허용하고 외래 키 제약을 활성화합니다.
    메모리 DB("sqlite://")는 모든 세션이 같은 연결을 쓰도록 StaticPool을 사용합니다.
    """
    url = db_config.url
    kwargs = {"echo": db_config.echo}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool

    engine = create_engine(url, **kwargs)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def make_session_factory(engine: Engine) -> sessionmaker:
    # autoflush=False: 리포지토리가 명시적으로 flush/commit해야 DB에 반영됩니다.
    # expire_on_commit=False: commit 이후에도 반환한 객체의 속성을 그대로 읽을 수 있습니다.
    return sessionmaker(autoflush=False, expire_on_commit=False, bind=engine)
