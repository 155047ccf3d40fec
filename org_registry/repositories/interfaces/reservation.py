from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import List, Optional
from org_registry.database import models

class IReservationRepository(ABC):
    @abstractmethod
    def atomic(self) -> AbstractContextManager:
        """
        블록 안의 모든 쓰기를 하나의 all-or-nothing 단위로 묶습니다.

        블록이 정상 종료되면 한 번에 commit하고, 예외가 발생하면 전부 rollback한 뒤
        예외를 그대로 다시 발생시킵니다. 블록 밖에서 호출된 쓰기는 각각 즉시 commit됩니다.
        """
        pass

    @abstractmethod
    def find_by_name(self, name: str) -> Optional[models.OrgReservation]:
        """조직 이름으로 예약을 조회합니다. 소유자와 무관합니다."""
        pass

    @abstractmethod
    def find_mapping_by_name_and_owner_email(self, name: str, email: str) -> Optional[models.OrgReservationMapping]:
        """해당 이메일의 소유자가 가진 이름의 예약을 소유자, 클라우드 매핑과 함께 조회합니다."""
        pass

    @abstractmethod
    def create(self, reservation_model: models.OrgReservation) -> models.OrgReservation:
        """
        새로운 조직 이름 예약을 생성합니다.

        Raises:
            DuplicateRecordError: 같은 이름의 예약이 이미 존재할 때.
        """
        pass

    @abstractmethod
    def update_owner(self, reservation_uuid: str, new_owner_id: str) -> None:
        """예약의 소유자를 변경합니다. 예약의 uuid는 유지됩니다."""
        pass

    @abstractmethod
    def delete(self, reservation_uuid: str) -> None:
        """예약을 삭제합니다."""
        pass

    @abstractmethod
    def create_cloud_mapping(self, cloud_model: models.CloudReservation) -> models.CloudReservation:
        """예약에 대한 클라우드 매핑을 생성합니다."""
        pass

    @abstractmethod
    def update_cloud_mapping(self, cloud_model: models.CloudReservation) -> None:
        """reservation_id가 가리키는 클라우드 매핑의 플래그를 갱신합니다."""
        pass

    @abstractmethod
    def delete_cloud_mapping(self, reservation_id: str) -> None:
        """예약에 대한 클라우드 매핑을 삭제합니다."""
        pass

    @abstractmethod
    def list_names_by_owner_email(self, email: str) -> List[str]:
        """해당 이메일의 소유자가 가진 모든 조직 이름을 이름순으로 조회합니다."""
        pass
