from typing import List, Optional
from org_registry.database import models
from org_registry.repositories.interfaces import IReservationRepository
from .base import SqlalchemyRepository

class SqlalchemyReservationRepository(SqlalchemyRepository, IReservationRepository):
    def find_by_name(self, name: str) -> Optional[models.OrgReservation]:
        with self._translate_errors():
            return self.db.query(models.OrgReservation).filter(models.OrgReservation.organization_name == name).first()

    def find_mapping_by_name_and_owner_email(self, name: str, email: str) -> Optional[models.OrgReservationMapping]:
        with self._translate_errors():
            row = (
                self.db.query(models.OrgReservation, models.Owner, models.CloudReservation)
                .join(models.Owner, models.OrgReservation.owner_id == models.Owner.id)
                .join(models.CloudReservation, models.CloudReservation.reservation_id == models.OrgReservation.uuid)
                .filter(models.OrgReservation.organization_name == name, models.Owner.email == email)
                .first()
            )
        if row is None:
            return None
        reservation, owner, cloud_mapping = row
        return models.OrgReservationMapping(org_reservation=reservation, owner=owner, cloud_mapping=cloud_mapping)

    def create(self, reservation_model: models.OrgReservation) -> models.OrgReservation:
        with self._translate_errors():
            self.db.add(reservation_model)
            self._save()
            self.db.refresh(reservation_model)
            return reservation_model

    def update_owner(self, reservation_uuid: str, new_owner_id: str) -> None:
        with self._translate_errors():
            self.db.query(models.OrgReservation).filter(models.OrgReservation.uuid == reservation_uuid).update(
                {models.OrgReservation.owner_id: new_owner_id}, synchronize_session="fetch"
            )
            self._save()

    def delete(self, reservation_uuid: str) -> None:
        with self._translate_errors():
            self.db.query(models.OrgReservation).filter(models.OrgReservation.uuid == reservation_uuid).delete(
                synchronize_session="fetch"
            )
            self._save()

    def create_cloud_mapping(self, cloud_model: models.CloudReservation) -> models.CloudReservation:
        with self._translate_errors():
            self.db.add(cloud_model)
            self._save()
            self.db.refresh(cloud_model)
            return cloud_model

    def update_cloud_mapping(self, cloud_model: models.CloudReservation) -> None:
        with self._translate_errors():
            self.db.query(models.CloudReservation).filter(
                models.CloudReservation.reservation_id == cloud_model.reservation_id
            ).update(
                {
                    models.CloudReservation.choreo_cloud: cloud_model.choreo_cloud,
                    models.CloudReservation.asgardio_cloud: cloud_model.asgardio_cloud,
                    models.CloudReservation.ballerina_cloud: cloud_model.ballerina_cloud,
                },
                synchronize_session="fetch",
            )
            self._save()
            # onupdate로 바뀐 updated_at은 세션에 반영되지 않으므로 다시 읽음
            stored = self.db.get(models.CloudReservation, cloud_model.reservation_id)
            if stored is not None:
                self.db.refresh(stored)

    def delete_cloud_mapping(self, reservation_id: str) -> None:
        with self._translate_errors():
            self.db.query(models.CloudReservation).filter(
                models.CloudReservation.reservation_id == reservation_id
            ).delete(synchronize_session="fetch")
            self._save()

    def list_names_by_owner_email(self, email: str) -> List[str]:
        with self._translate_errors():
            rows = (
                self.db.query(models.OrgReservation.organization_name)
                .join(models.Owner, models.OrgReservation.owner_id == models.Owner.id)
                .filter(models.Owner.email == email)
                .order_by(models.OrgReservation.organization_name.asc())
                .all()
            )
        return [row[0] for row in rows]
