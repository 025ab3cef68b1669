from datetime import datetime, timedelta, timezone

from videotube.db.base import new_id, utcnow
from videotube.db.models.user import User


def test_utcnow_is_naive_utc():
    stamp = utcnow()
    assert stamp.tzinfo is None
    assert abs(datetime.now(timezone.utc).replace(tzinfo=None) - stamp) < timedelta(seconds=5)


def test_new_ids_are_distinct_hex():
    first, second = new_id(), new_id()
    assert first != second
    assert len(first) == 32
    int(first, 16)


def test_created_at_defaults_to_utcnow(db):
    before = utcnow()
    user = User(
        username="alice",
        email="alice@example.com",
        full_name="Alice",
        password_hash="not-a-real-hash",
        avatar_url="https://cdn.example.com/alice.png",
    )
    db.add(user)
    db.commit()

    assert before <= user.created_at <= utcnow()
