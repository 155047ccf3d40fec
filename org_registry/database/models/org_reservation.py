from sqlalchemy import Column, String, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from ..database import Base
from .serialization import isoformat

class OrgReservation(Base):
    """
    조직 이름 하나를 현재 소유자 한 명에게 묶어두는 예약입니다.
    organization_name은 전체에서 유일하며(DB 유니크 제약), 소유권 이전 시
    uuid는 그대로 두고 owner_id만 바뀝니다.
    """
    __tablename__ = "organization_reservations"
    uuid = Column(String(36), primary_key=True)
    organization_name = Column(String(255), unique=True, nullable=False, index=True)
    owner_id = Column(String(36), ForeignKey("owners.id"), nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    owner = relationship("Owner", back_populates="reservations")
    cloud_mapping = relationship("CloudReservation", back_populates="reservation", uselist=False, cascade="all, delete-orphan")

    def to_dict(self):
        return {
            "uuid": self.uuid,
            "organizationName": self.organization_name,
            "ownerId": self.owner_id,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }
