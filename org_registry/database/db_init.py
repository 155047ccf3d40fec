import structlog
from sqlalchemy.engine import Engine

from org_registry.config import load_config
from .database import Base, make_engine
from . import models  # noqa: F401  모델을 Base.metadata에 등록

logger = structlog.get_logger(__name__)

def initialize_db(engine: Engine):
    """
    모든 테이블을 생성합니다. (이미 존재하면 생성하지 않음)
    예약 데이터는 서비스 호출로만 만들어지므로 기본 데이터는 삽입하지 않습니다.
    """
    Base.metadata.create_all(bind=engine)
    logger.info("database tables ready", tables=sorted(Base.metadata.tables))

if __name__ == '__main__':
    initialize_db(make_engine(load_config().db))
