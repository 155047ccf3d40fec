from .owner import Owner
from .org_reservation import OrgReservation
from .cloud_reservation import CloudReservation
from .reservation_mapping import OrgReservationMapping

__all__ = ["Owner", "OrgReservation", "CloudReservation", "OrgReservationMapping"]
