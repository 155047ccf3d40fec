from typing import Optional
from org_registry.database import models
from org_registry.repositories.interfaces import IOwnerRepository
from .base import SqlalchemyRepository

class SqlalchemyOwnerRepository(SqlalchemyRepository, IOwnerRepository):
    def find_by_email(self, email: str) -> Optional[models.Owner]:
        with self._translate_errors():
            return self.db.query(models.Owner).filter(models.Owner.email == email).first()

    def create(self, owner_model: models.Owner) -> models.Owner:
        with self._translate_errors():
            self.db.add(owner_model)
            self._save()
            self.db.refresh(owner_model)
            return owner_model

    def update_email(self, owner_id: str, new_email: str) -> None:
        with self._translate_errors():
            self.db.query(models.Owner).filter(models.Owner.id == owner_id).update(
                {models.Owner.email: new_email}, synchronize_session="fetch"
            )
            self._save()
