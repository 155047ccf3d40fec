from contextlib import contextmanager
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from org_registry.repositories.exceptions import DuplicateRecordError, PersistenceError

# 같은 세션을 공유하는 리포지토리들이 atomic 블록 깊이를 함께 보도록 session.info에 저장
_ATOMIC_DEPTH_KEY = "org_registry.atomic_depth"

class SqlalchemyRepository:
    def __init__(self, db_session: Session):
        self.db = db_session

    @contextmanager
    def atomic(self):
        depth = self.db.info.get(_ATOMIC_DEPTH_KEY, 0)
        self.db.info[_ATOMIC_DEPTH_KEY] = depth + 1
        try:
            with self._translate_errors():
                yield
                if depth == 0:
                    self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        finally:
            self.db.info[_ATOMIC_DEPTH_KEY] = depth

    def _in_atomic(self) -> bool:
        return self.db.info.get(_ATOMIC_DEPTH_KEY, 0) > 0

    def _save(self):
        """atomic 블록 안이면 flush만, 밖이면 즉시 commit합니다."""
        if self._in_atomic():
            self.db.flush()
        else:
            self.db.commit()

    @contextmanager
    def _translate_errors(self):
        try:
            yield
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateRecordError(str(e.orig)) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(str(e)) from e
