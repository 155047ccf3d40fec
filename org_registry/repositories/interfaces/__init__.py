from .owner import IOwnerRepository
from .reservation import IReservationRepository

__all__ = ["IOwnerRepository", "IReservationRepository"]
