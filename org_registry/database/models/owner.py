from sqlalchemy import Column, String, DateTime, func
from sqlalchemy.orm import relationship
from ..database import Base
from .serialization import isoformat

class Owner(Base):
    """
    이메일로 식별되는 조직 이름 예약의 소유자를 나타냅니다.
    이메일당 최대 하나의 Owner만 존재하며, 엔진은 Owner를 삭제하거나 병합하지 않습니다.
    """
    __tablename__ = "owners"
    id = Column(String(36), primary_key=True)
    email = Column(String(320), unique=True, nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    reservations = relationship("OrgReservation", back_populates="owner")

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }
