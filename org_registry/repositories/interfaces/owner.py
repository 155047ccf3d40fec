from abc import ABC, abstractmethod
from typing import Optional
from org_registry.database import models

class IOwnerRepository(ABC):
    @abstractmethod
    def find_by_email(self, email: str) -> Optional[models.Owner]:
        """이메일로 특정 소유자를 조회합니다. 없으면 None을 반환합니다."""
        pass

    @abstractmethod
    def create(self, owner_model: models.Owner) -> models.Owner:
        """
        새로운 소유자를 데이터베이스에 생성합니다.

        Raises:
            DuplicateRecordError: 같은 이메일의 소유자가 이미 존재할 때.
        """
        pass

    @abstractmethod
    def update_email(self, owner_id: str, new_email: str) -> None:
        """
        소유자의 이메일을 변경합니다.

        Raises:
            DuplicateRecordError: 새 이메일을 다른 소유자가 이미 사용 중일 때.
        """
        pass
