from .sqlalchemy_owner_repository import SqlalchemyOwnerRepository
from .sqlalchemy_reservation_repository import SqlalchemyReservationRepository

__all__ = ["SqlalchemyOwnerRepository", "SqlalchemyReservationRepository"]
