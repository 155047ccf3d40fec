from dataclasses import dataclass

from .owner import Owner
from .org_reservation import OrgReservation
from .cloud_reservation import CloudReservation

@dataclass
class OrgReservationMapping:
    """
    OrgReservation, Owner, CloudReservation을 조인한 읽기 전용 뷰입니다.
    예약 서비스의 주요 반환 타입이며, 테이블로 저장되지 않습니다.
    """
    org_reservation: OrgReservation
    owner: Owner
    cloud_mapping: CloudReservation

    def to_dict(self):
        return {
            "orgReservation": self.org_reservation.to_dict(),
            "owner": self.owner.to_dict(),
            "cloudMapping": self.cloud_mapping.to_dict(),
        }
