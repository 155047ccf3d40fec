import uuid
from typing import List, Optional

import structlog

from org_registry.database import models
from org_registry.repositories.exceptions import DuplicateRecordError
from org_registry.repositories.interfaces import IOwnerRepository, IReservationRepository
from org_registry.services.validation import is_valid_email, is_valid_org_name
from org_registry.services.exceptions import (
    InvalidRequestError, NotFoundError, DuplicateReservationError
)

logger = structlog.get_logger(__name__)

# 클라우드 서비스 키와 CloudReservation 플래그 컬럼의 대응
CHOREO_KEY = "CH"
ASGARDIO_KEY = "AG"
BALLERINA_KEY = "BL"

CLOUD_KEY_FIELDS = {
    CHOREO_KEY: "choreo_cloud",
    ASGARDIO_KEY: "asgardio_cloud",
    BALLERINA_KEY: "ballerina_cloud",
}


def cloud_field_for(cloud_key) -> Optional[str]:
    """cloud_key에 대응하는 플래그 컬럼 이름을 반환합니다. 문자열이 아니거나 알 수 없는 키는 None."""
    if not isinstance(cloud_key, str):
        return None
    return CLOUD_KEY_FIELDS.get(cloud_key)


def with_cloud_flag(cloud_mapping: models.CloudReservation, cloud_key: str, value: bool) -> models.CloudReservation:
    """
    cloud_key에 해당하는 플래그만 value로 바꾼 클라우드 매핑 사본을 반환합니다.
    원본(세션에 올라간 객체)은 변경하지 않으며, 알 수 없는 키는 아무것도 바꾸지 않습니다.
    """
    updated = models.CloudReservation(
        reservation_id=cloud_mapping.reservation_id,
        choreo_cloud=bool(cloud_mapping.choreo_cloud),
        asgardio_cloud=bool(cloud_mapping.asgardio_cloud),
        ballerina_cloud=bool(cloud_mapping.ballerina_cloud),
        created_at=cloud_mapping.created_at,
        updated_at=cloud_mapping.updated_at,
    )
    field_name = cloud_field_for(cloud_key)
    if field_name:
        setattr(updated, field_name, value)
    return updated


class ReservationService:
    """
    조직 이름 예약, 클라우드 플래그 확장/회수, 소유권 이전을 결정하는 서비스입니다.

    호출 사이에 상태를 보관하지 않으며, 모든 상태는 리포지토리(DB)에 있습니다.
    """

    def __init__(self, owner_repo: IOwnerRepository, reservation_repo: IReservationRepository):
        """
        ReservationService를 초기화합니다.

        Args:
            owner_repo: 소유자 데이터에 접근하기 위한 리포지토리.
            reservation_repo: 예약과 클라우드 매핑 데이터에 접근하기 위한 리포지토리.
        """
        self.owner_repo = owner_repo
        self.reservation_repo = reservation_repo

    def create_or_extend_reservation(self, organization_name: str, owner_email: str, cloud_key: str) -> models.OrgReservationMapping:
        """
        조직 이름을 새로 예약하거나, 이미 소유한 예약에 클라우드 플래그를 추가합니다.

        같은 소유자가 같은 키로 다시 요청하면 아무것도 쓰지 않고 기존 매핑을 그대로 반환합니다.

        Args:
            organization_name: 예약할 조직 이름.
            owner_email: 예약을 요청한 소유자의 이메일.
            cloud_key: 예약할 클라우드 서비스 키 ("CH", "AG", "BL").

        Returns:
            예약, 소유자, 클라우드 매핑을 묶은 OrgReservationMapping.

        Raises:
            InvalidRequestError: 이메일/조직 이름 형식이 잘못되었거나, 새 예약에 알 수 없는 키를 지정했을 때.
            DuplicateReservationError: 다른 소유자가 이미 해당 이름을 예약했을 때.
        """
        self._validate_email(owner_email)
        self._validate_org_name(organization_name)

        # 1. 요청자가 이미 소유한 예약이면 클라우드 플래그만 확장
        own_reservation = self.lookup_own_reservation(organization_name, owner_email)
        if own_reservation:
            updated_mapping = with_cloud_flag(own_reservation.cloud_mapping, cloud_key, True)
            if updated_mapping.flags() == own_reservation.cloud_mapping.flags():
                return own_reservation

            self.reservation_repo.update_cloud_mapping(updated_mapping)
            logger.info("cloud mapping extended", org_name=organization_name, cloud_key=cloud_key)

            # 쓰기 이후의 상태(updated_at 포함)를 DB에서 다시 읽어 반환
            extended = self.reservation_repo.find_mapping_by_name_and_owner_email(organization_name, owner_email)
            if not extended:
                raise NotFoundError(f"{organization_name} is not found in the registry with your ownership")
            return extended

        # 2. 다른 소유자가 이미 예약한 이름인지 확인
        if self.reservation_repo.find_by_name(organization_name):
            logger.warning("org name is reserved already", org_name=organization_name)
            raise DuplicateReservationError(f"{organization_name} is already reserved by another user")

        # 모든 플래그가 꺼진 매핑은 만들지 않음
        if cloud_field_for(cloud_key) is None:
            raise InvalidRequestError(f"Unknown cloud service '{cloud_key}'.")

        # 3. 소유자 확인/생성, 예약, 클라우드 매핑을 하나의 atomic 단위로 생성
        try:
            with self.reservation_repo.atomic():
                owner = self._resolve_owner(owner_email)
                new_reservation = models.OrgReservation(
                    uuid=str(uuid.uuid4()),
                    organization_name=organization_name,
                    owner_id=owner.id,
                )
                empty_mapping = models.CloudReservation(
                    reservation_id=new_reservation.uuid,
                    choreo_cloud=False,
                    asgardio_cloud=False,
                    ballerina_cloud=False,
                )
                created_reservation = self.reservation_repo.create(new_reservation)
                created_mapping = self.reservation_repo.create_cloud_mapping(
                    with_cloud_flag(empty_mapping, cloud_key, True)
                )
        except DuplicateRecordError as e:
            # 소유자 이메일 충돌처럼 이름과 무관한 위반은 그대로 전달
            if not self.reservation_repo.find_by_name(organization_name):
                raise
            # 앞선 조회 이후 동시 요청이 같은 이름을 먼저 예약한 경우
            logger.warning("org name was reserved concurrently", org_name=organization_name)
            raise DuplicateReservationError(f"{organization_name} is already reserved by another user") from e

        logger.info("reservation created", org_name=organization_name, reservation_id=created_reservation.uuid)
        return models.OrgReservationMapping(
            org_reservation=created_reservation,
            owner=owner,
            cloud_mapping=created_mapping,
        )

    def lookup_own_reservation(self, organization_name: str, owner_email: str) -> Optional[models.OrgReservationMapping]:
        """
        owner_email이 소유한 organization_name 예약을 조회합니다. 없으면 None을 반환합니다.

        Raises:
            InvalidRequestError: 이메일 형식이 잘못되었을 때.
        """
        self._validate_email(owner_email)
        return self.reservation_repo.find_mapping_by_name_and_owner_email(organization_name, owner_email)

    def transfer_ownership(self, organization_name: str, current_owner_email: str, new_owner_email: str) -> models.OrgReservationMapping:
        """
        예약의 소유권을 다른 이메일의 소유자에게 이전합니다.

        새 소유자가 등록되어 있지 않으면 생성합니다. 예약의 uuid와 클라우드 플래그는 유지됩니다.

        Raises:
            InvalidRequestError: 조직 이름 또는 이메일 형식이 잘못되었을 때.
            NotFoundError: current_owner_email이 해당 이름의 예약을 소유하고 있지 않을 때.
        """
        self._validate_org_name(organization_name)
        self._validate_email(new_owner_email)

        own_reservation = self.lookup_own_reservation(organization_name, current_owner_email)
        if not own_reservation:
            raise NotFoundError(f"Cannot find a reservation mapping with {organization_name} reservation name")

        # 새 소유자 생성과 소유권 변경은 함께 반영되거나 함께 취소됨
        with self.reservation_repo.atomic():
            new_owner = self._resolve_owner(new_owner_email)
            self.reservation_repo.update_owner(own_reservation.org_reservation.uuid, new_owner.id)

        # 쓰기 이후의 상태를 DB에서 다시 읽어 반환
        updated_reservation = self.reservation_repo.find_by_name(organization_name)
        if not updated_reservation:
            raise NotFoundError(f"{organization_name} is not found in the registry")

        logger.info("reservation ownership transferred", org_name=organization_name, new_owner_id=new_owner.id)
        return models.OrgReservationMapping(
            org_reservation=updated_reservation,
            owner=new_owner,
            cloud_mapping=own_reservation.cloud_mapping,
        )

    def retract_cloud_flag(self, organization_name: str, owner_email: str, cloud_key: str) -> None:
        """
        소유한 예약에서 클라우드 플래그 하나를 회수합니다.

        마지막 플래그가 회수되면 클라우드 매핑과 예약을 함께 삭제하여 이름을 해제합니다.
        알 수 없는 키는 아무 플래그도 바꾸지 않습니다.

        Raises:
            InvalidRequestError: 이메일 형식이 잘못되었을 때.
            NotFoundError: owner_email이 해당 이름의 예약을 소유하고 있지 않을 때.
        """
        self._validate_email(owner_email)

        own_reservation = self.lookup_own_reservation(organization_name, owner_email)
        if not own_reservation:
            logger.warning("org name is not owned by the user", org_name=organization_name)
            raise NotFoundError(f"{organization_name} is not found in the registry with your ownership")

        updated_mapping = with_cloud_flag(own_reservation.cloud_mapping, cloud_key, False)
        if updated_mapping.has_active_flag():
            self.reservation_repo.update_cloud_mapping(updated_mapping)
            logger.info("cloud mapping retracted", org_name=organization_name, cloud_key=cloud_key)
            return

        # 마지막 플래그가 회수되면 이름을 해제
        reservation_id = own_reservation.org_reservation.uuid
        with self.reservation_repo.atomic():
            self.reservation_repo.delete_cloud_mapping(reservation_id)
            self.reservation_repo.delete(reservation_id)
        logger.info("reservation released", org_name=organization_name, reservation_id=reservation_id)

    def search_reservation_by_name(self, organization_name: str) -> str:
        """
        해당 이름의 예약이 존재하면 이름을 그대로 반환합니다. 소유자 정보는 노출하지 않습니다.

        Raises:
            NotFoundError: 해당 이름의 예약이 없을 때.
        """
        reservation = self.reservation_repo.find_by_name(organization_name)
        if not reservation:
            logger.warning("org name is not found in the registry", org_name=organization_name)
            raise NotFoundError(f"{organization_name} is not found in the registry")
        return reservation.organization_name

    def list_reservations_of_owner(self, owner_email: str) -> List[str]:
        """
        소유자가 가진 모든 조직 이름을 이름순으로 조회합니다.

        Raises:
            NotFoundError: 소유한 예약이 하나도 없을 때.
        """
        names = self.reservation_repo.list_names_by_owner_email(owner_email)
        if not names:
            raise NotFoundError("No reservations are found in the registry")
        return names

    def update_owner_email(self, current_email: str, new_email: str) -> models.Owner:
        """
        소유자의 이메일을 변경합니다. 소유자 id와 소유한 예약은 그대로 유지됩니다.

        Raises:
            InvalidRequestError: 이메일 형식이 잘못되었을 때.
            NotFoundError: current_email의 소유자가 없을 때.
            DuplicateReservationError: new_email을 다른 소유자가 이미 사용 중일 때.
        """
        self._validate_email(current_email)
        self._validate_email(new_email)

        owner = self.owner_repo.find_by_email(current_email)
        if not owner:
            raise NotFoundError(f"Owner '{current_email}' is not found in the registry")
        if new_email == current_email:
            return owner
        if self.owner_repo.find_by_email(new_email):
            raise DuplicateReservationError(f"Owner '{new_email}' is already registered")

        try:
            self.owner_repo.update_email(owner.id, new_email)
        except DuplicateRecordError as e:
            raise DuplicateReservationError(f"Owner '{new_email}' is already registered") from e

        updated_owner = self.owner_repo.find_by_email(new_email)
        if not updated_owner:
            raise NotFoundError(f"Owner '{new_email}' is not found in the registry")
        return updated_owner

    def _resolve_owner(self, email: str) -> models.Owner:
        """이메일로 소유자를 조회하고, 없으면 새로 생성합니다."""
        owner = self.owner_repo.find_by_email(email)
        if owner:
            return owner
        created = self.owner_repo.create(models.Owner(id=str(uuid.uuid4()), email=email))
        logger.info("owner created", owner_id=created.id)
        return created

    def _validate_email(self, email: str):
        if not is_valid_email(email):
            logger.warning("email is invalid")
            raise InvalidRequestError("Email is invalid")

    def _validate_org_name(self, organization_name: str):
        if not is_valid_org_name(organization_name):
            logger.warning("org name is invalid")
            raise InvalidRequestError("Organization reservation should contain only alpha numeric characters")
