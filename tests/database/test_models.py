# tests/database/test_models.py
from datetime import datetime

from org_registry.database import models
from org_registry.database.models.serialization import isoformat

def test_isoformat_handles_missing_timestamp():
    assert isoformat(None) is None
    assert isoformat(datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02T03:04:05"

def test_to_dict_uses_iso_timestamps(owner_repo):
    """저장된 모델의 to_dict는 타임스탬프를 ISO 문자열로 반환합니다."""
    owner = owner_repo.create(models.Owner(id="owner-1", email="a@x.com"))

    data = owner.to_dict()

    assert data["email"] == "a@x.com"
    assert datetime.fromisoformat(data["createdAt"]) == owner.created_at

def test_unsaved_cloud_mapping_has_no_timestamps():
    cloud = models.CloudReservation(reservation_id="res-1", choreo_cloud=True, asgardio_cloud=False, ballerina_cloud=False)
    assert cloud.to_dict()["createdAt"] is None
