import pytest
from sqlalchemy import select

from roadtrack.models import AuditLog
from roadtrack.utils.audit import actor_from_user, log_audit, sanitize_payload_for_audit


def test_audit_log_masks_personal_fields(db_session):
    payload = {
        "email": "site.office@lae-civil.com.pg",
        "phone": "+675 472 1234",
        "contact_person": "Mary Kaupa",
        "name": "Lae Civil Works",
        "nested": [{"password": "hunter22"}],
    }

    log_audit(db_session, actor="test", action="MASK_TEST", entity="Contractor", entity_id=1, data=payload)
    db_session.commit()

    entry = db_session.scalars(
        select(AuditLog).where(AuditLog.action == "MASK_TEST").order_by(AuditLog.id.desc())
    ).first()
    assert entry is not None
    assert entry.data_json["email"] == "***@lae-civil.com.pg"
    assert entry.data_json["phone"] == "***234"
    assert entry.data_json["contact_person"] == "***redacted***"
    assert entry.data_json["name"] == "Lae Civil Works"
    assert entry.data_json["nested"][0]["password"] == "***redacted***"


def test_none_values_are_kept():
    assert sanitize_payload_for_audit({"email": None, "phone": "12"}) == {"email": None, "phone": "***"}


@pytest.mark.anyio
async def test_contractor_creation_is_audited_without_email(client, db_session, admin_headers):
    response = await client.post(
        "/api/contractors",
        json={"name": "Highlands Earthmoving", "licenseNumber": "LIC-7781", "email": "ops@hem.com.pg"},
        headers=admin_headers,
    )
    assert response.status_code == 201

    entry = db_session.scalars(
        select(AuditLog).where(AuditLog.entity == "Contractor", AuditLog.entity_id == response.json()["id"])
    ).one()
    assert entry.action == "CONTRACTOR_CREATED"
    assert entry.data_json["email"] == "***@hem.com.pg"


def test_actor_string():
    class _User:
        id = 7

    assert actor_from_user(_User()) == "user:7"
    assert actor_from_user(None) == "system"
