import json
import math
import os
from datetime import datetime, timezone

from svix.webhooks import Webhook

from app.models.favorite import UserFavorite
from app.models.property import Property
from app.models.user import DEFAULT_PREFERENCES, User
from app.models.user_search import UserSearch

WEBHOOK_SECRET = os.environ["CLERK_WEBHOOK_SECRET"]


def _signed_headers(payload: str, msg_id: str = "msg_test_1", secret: str = WEBHOOK_SECRET):
    now = datetime.now(timezone.utc)
    signature = Webhook(secret).sign(msg_id, now, payload)
    return {
        "svix-id": msg_id,
        "svix-timestamp": str(math.floor(now.timestamp())),
        "svix-signature": signature,
        "content-type": "application/json",
    }


def _post_event(client, event: dict, **kwargs):
    payload = json.dumps(event)
    return client.post(
        "/webhooks/clerk", content=payload, headers=_signed_headers(payload, **kwargs)
    )


def _clerk_user(user_id="user_clerk_1", email="new@example.com", **overrides):
    data = {
        "id": user_id,
        "email_addresses": [{"id": "idn_1", "email_address": email}],
        "phone_numbers": [{"id": "idn_2", "phone_number": "+15125550100"}],
        "first_name": "Robin",
        "last_name": "Lee",
        "image_url": "https://img.clerk.test/robin.png",
        "object": "user",
    }
    data.update(overrides)
    return data


def test_user_created_provisions_user(client, db_session):
    r = _post_event(client, {"type": "user.created", "data": _clerk_user()})
    assert r.status_code == 200, r.text
    assert r.json() == {"message": "Webhook processed successfully"}

    user = db_session.get(User, "user_clerk_1")
    assert user is not None
    assert user.email == "new@example.com"
    assert user.phone == "+15125550100"
    assert user.first_name == "Robin"
    assert user.profile_image_url == "https://img.clerk.test/robin.png"
    assert user.preferences == DEFAULT_PREFERENCES


def test_user_created_without_email_or_phone(client, db_session):
    data = _clerk_user(email_addresses=[], phone_numbers=[], image_url=None)
    r = _post_event(client, {"type": "user.created", "data": data})
    assert r.status_code == 200
    user = db_session.get(User, "user_clerk_1")
    assert user.email == ""
    assert user.phone is None


def test_duplicate_user_created_is_conflict(client, db_session):
    db_session.add(User(id="user_clerk_1", email="existing@example.com"))
    db_session.commit()
    r = _post_event(client, {"type": "user.created", "data": _clerk_user()})
    assert r.status_code == 409
    assert r.json() == {"error": "User already exists"}


def test_user_updated_changes_only_supplied_fields(client, db_session):
    db_session.add(
        User(
            id="user_clerk_1",
            email="old@example.com",
            first_name="Old",
            last_name="Name",
            phone="+10000000000",
        )
    )
    db_session.commit()

    data = _clerk_user(email="fresh@example.com", first_name="Fresh", phone_numbers=[])
    data["last_name"] = None
    r = _post_event(client, {"type": "user.updated", "data": data})
    assert r.status_code == 200

    db_session.expire_all()
    user = db_session.get(User, "user_clerk_1")
    assert user.email == "fresh@example.com"
    assert user.first_name == "Fresh"
    assert user.last_name == "Name"
    assert user.phone == "+10000000000"


def test_update_for_unknown_user_is_not_found(client, db_session):
    r = _post_event(client, {"type": "user.updated", "data": _clerk_user("user_missing")})
    assert r.status_code == 404
    assert db_session.get(User, "user_missing") is None


def test_user_deleted_cascades(client, db_session):
    db_session.add(User(id="user_clerk_1", email="gone@example.com"))
    db_session.add(
        Property(id="wp-1", address="1 Hook St", city="Austin", state="TX", zip_code="78701", price=1)
    )
    db_session.add(UserFavorite(user_id="user_clerk_1", property_id="wp-1"))
    db_session.add(UserSearch(user_id="user_clerk_1", search_criteria={"city": "Austin"}))
    db_session.commit()

    r = _post_event(
        client, {"type": "user.deleted", "data": {"id": "user_clerk_1", "deleted": True}}
    )
    assert r.status_code == 200

    db_session.expire_all()
    assert db_session.get(User, "user_clerk_1") is None
    assert db_session.query(UserFavorite).count() == 0
    assert db_session.query(UserSearch).count() == 0
    assert db_session.get(Property, "wp-1") is not None


def test_invalid_signature_is_rejected_without_writes(client, db_session):
    payload = json.dumps({"type": "user.created", "data": _clerk_user()})
    headers = _signed_headers(payload, secret="whsec_" + "A" * 32)
    r = client.post("/webhooks/clerk", content=payload, headers=headers)
    assert r.status_code == 400
    assert r.json() == {"error": "Invalid webhook signature"}
    assert db_session.query(User).count() == 0


def test_tampered_payload_is_rejected(client, db_session):
    payload = json.dumps({"type": "user.created", "data": _clerk_user()})
    headers = _signed_headers(payload)
    tampered = payload.replace("new@example.com", "evil@example.com")
    r = client.post("/webhooks/clerk", content=tampered, headers=headers)
    assert r.status_code == 400
    assert db_session.query(User).count() == 0


def test_missing_svix_headers(client, db_session):
    r = client.post(
        "/webhooks/clerk", json={"type": "user.created", "data": _clerk_user()}
    )
    assert r.status_code == 400
    assert r.json() == {"error": "Missing svix headers"}
    assert db_session.query(User).count() == 0


def test_unknown_event_is_acknowledged(client, db_session):
    r = _post_event(client, {"type": "session.created", "data": {"id": "sess_1"}})
    assert r.status_code == 200
    assert r.json() == {"message": "Webhook ignored"}
    assert db_session.query(User).count() == 0
