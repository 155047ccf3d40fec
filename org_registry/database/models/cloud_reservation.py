from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from ..database import Base
from .serialization import isoformat

class CloudReservation(Base):
    """
    예약이 어떤 클라우드 서비스에서 점유되고 있는지를 나타내는 플래그 묶음입니다.
    OrgReservation과 1:1 관계이며, 함께 생성되고 함께 삭제됩니다.
    """
    __tablename__ = "mapped_clouds"
    reservation_id = Column(String(36), ForeignKey("organization_reservations.uuid"), primary_key=True)
    choreo_cloud = Column(Boolean, nullable=False, default=False)
    asgardio_cloud = Column(Boolean, nullable=False, default=False)
    ballerina_cloud = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    reservation = relationship("OrgReservation", back_populates="cloud_mapping")

    def flags(self):
        """(choreo, asgardio, ballerina) 플래그 튜플을 반환합니다."""
        return (bool(self.choreo_cloud), bool(self.asgardio_cloud), bool(self.ballerina_cloud))

    def has_active_flag(self) -> bool:
        return any(self.flags())

    def to_dict(self):
        return {
            "reservationId": self.reservation_id,
            "choreoCloud": bool(self.choreo_cloud),
            "asgardioCloud": bool(self.asgardio_cloud),
            "ballerinaCloud": bool(self.ballerina_cloud),
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }
