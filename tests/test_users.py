import uuid

from sqlalchemy import func, select

from helpers import API, PASSWORD, login, register, session_tokens, upload_video
from videotube.core.security import verify_password
from videotube.db.models.user import User


def _stored_user(session_factory, username):
    with session_factory() as db:
        return db.scalar(select(User).where(User.username == username))


class TestRegister:
    def test_register_hashes_password_and_hides_secrets(self, client, session_factory, assets):
        res = register(client, "alice", cover=True)

        assert res.status_code == 201
        body = res.json()
        assert body["success"] is True
        assert body["statusCode"] == 201
        user = body["data"]
        assert user["username"] == "alice"
        assert user["fullName"] == "Alice Tester"
        assert user["avatar"] == assets.uploaded[0].url
        assert user["coverImage"] == assets.uploaded[1].url
        for secret in ("password", "passwordHash", "refreshToken"):
            assert secret not in user

        stored = _stored_user(session_factory, "alice")
        assert stored.password_hash != PASSWORD
        assert verify_password(PASSWORD, stored.password_hash)
        assert stored.refresh_token is None

    def test_register_removes_spooled_files(self, client, assets):
        register(client, "alice", cover=True)
        assert len(assets.local_paths) == 2
        assert all(not path.exists() for path in assets.local_paths)

    def test_duplicate_username_conflicts(self, client, session_factory, assets):
        assert register(client, "alice").status_code == 201

        res = register(client, "alice", email="other@example.com")

        assert res.status_code == 409
        assert res.json()["success"] is False
        with session_factory() as db:
            assert db.scalar(select(func.count(User.id))) == 1
        # no media is uploaded for the rejected request
        assert len(assets.uploaded) == 1

    def test_duplicate_email_conflicts(self, client):
        assert register(client, "alice").status_code == 201
        res = register(client, "alice2", email="alice@example.com")
        assert res.status_code == 409

    def test_missing_fields_rejected(self, client):
        res = client.post(
            f"{API}/users/register",
            data={"username": "alice", "password": PASSWORD},
            files={"avatar": ("avatar.png", b"x", "image/png")},
        )
        assert res.status_code == 400

    def test_missing_avatar_rejected(self, client, session_factory):
        res = client.post(
            f"{API}/users/register",
            data={"fullName": "Alice", "email": "alice@example.com", "username": "alice", "password": PASSWORD},
        )
        assert res.status_code == 400
        assert _stored_user(session_factory, "alice") is None

    def test_invalid_email_rejected(self, client):
        res = register(client, "alice", email="not-an-email")
        assert res.status_code == 400
        assert res.json()["errors"]

    def test_password_over_bcrypt_byte_limit_rejected(self, client, session_factory, assets):
        # 40 characters but 80 bytes of UTF-8
        res = register(client, "alice", password="é" * 40)

        assert res.status_code == 400
        assert res.json()["errors"]
        assert _stored_user(session_factory, "alice") is None
        assert assets.uploaded == []

    def test_failed_cover_upload_discards_avatar(self, client, session_factory, assets):
        assets.fail_on_upload = 2

        res = register(client, "alice", cover=True)

        assert res.status_code == 500
        assert res.json()["success"] is False
        assert assets.deleted == ["asset-1"]
        assert _stored_user(session_factory, "alice") is None
        assert all(not path.exists() for path in assets.local_paths)


class TestLogin:
    def test_login_sets_refresh_cookie_only(self, client, session_factory):
        register(client, "alice")

        res = client.post(f"{API}/users/login", json={"username": "alice", "password": PASSWORD})

        assert res.status_code == 200
        data = res.json()["data"]
        assert data["accessToken"]
        assert "refreshToken" not in data
        assert data["user"]["username"] == "alice"
        assert "passwordHash" not in data["user"]
        assert "refreshToken" not in data["user"]
        assert res.cookies["accessToken"] == data["accessToken"]
        assert res.cookies["refreshToken"]
        assert _stored_user(session_factory, "alice").refresh_token == res.cookies["refreshToken"]

    def test_login_by_email(self, client):
        register(client, "alice")
        res = client.post(f"{API}/users/login", json={"email": "alice@example.com", "password": PASSWORD})
        assert res.status_code == 200

    def test_wrong_password(self, client, session_factory):
        register(client, "alice")
        res = client.post(f"{API}/users/login", json={"username": "alice", "password": "wrong-password"})
        assert res.status_code == 401
        assert _stored_user(session_factory, "alice").refresh_token is None

    def test_unknown_user(self, client):
        res = client.post(f"{API}/users/login", json={"username": "nobody", "password": PASSWORD})
        assert res.status_code == 404

    def test_identifier_required(self, client):
        res = client.post(f"{API}/users/login", json={"password": PASSWORD})
        assert res.status_code == 400

    def test_second_login_invalidates_first_session(self, client):
        register(client, "alice")
        _, first = session_tokens(client, "alice")
        _, second = session_tokens(client, "alice")

        res = client.post(f"{API}/users/refresh-token", json={"refreshToken": first})
        assert res.status_code == 401
        client.cookies.clear()

        res = client.post(f"{API}/users/refresh-token", json={"refreshToken": second})
        assert res.status_code == 200


class TestRefreshToken:
    def test_refresh_token_is_single_use(self, client, session_factory):
        register(client, "alice")
        _, original = session_tokens(client, "alice")

        res = client.post(f"{API}/users/refresh-token", json={"refreshToken": original})
        assert res.status_code == 200
        assert "refreshToken" not in res.json()["data"]
        rotated = res.cookies["refreshToken"]
        assert rotated != original
        assert _stored_user(session_factory, "alice").refresh_token == rotated
        client.cookies.clear()

        replay = client.post(f"{API}/users/refresh-token", json={"refreshToken": original})
        assert replay.status_code == 401
        assert _stored_user(session_factory, "alice").refresh_token == rotated

    def test_refresh_from_cookie(self, client):
        register(client, "alice")
        assert client.post(f"{API}/users/login", json={"username": "alice", "password": PASSWORD}).status_code == 200

        res = client.post(f"{API}/users/refresh-token")

        assert res.status_code == 200
        assert res.cookies["accessToken"] == res.json()["data"]["accessToken"]
        assert "refreshToken" not in res.json()["data"]
        assert res.cookies["refreshToken"]

    def test_refresh_without_token(self, client):
        res = client.post(f"{API}/users/refresh-token")
        assert res.status_code == 401

    def test_access_token_is_not_a_refresh_token(self, client):
        register(client, "alice")
        access, _ = session_tokens(client, "alice")
        res = client.post(f"{API}/users/refresh-token", json={"refreshToken": access})
        assert res.status_code == 401

    def test_logout_revokes_refresh_token(self, client, session_factory):
        register(client, "alice")
        access, refresh = session_tokens(client, "alice")

        res = client.post(f"{API}/users/logout", headers={"Authorization": f"Bearer {access}"})
        assert res.status_code == 200
        assert _stored_user(session_factory, "alice").refresh_token is None

        res = client.post(f"{API}/users/refresh-token", json={"refreshToken": refresh})
        assert res.status_code == 401


class TestSession:
    def test_requires_token(self, client):
        res = client.get(f"{API}/users/current-user")
        assert res.status_code == 401
        body = res.json()
        assert body["success"] is False
        assert body["statusCode"] == 401
        assert res.headers["WWW-Authenticate"] == "Bearer"

    def test_rejects_garbage_token(self, client):
        res = client.get(f"{API}/users/current-user", headers={"Authorization": "Bearer not-a-jwt"})
        assert res.status_code == 401

    def test_rejects_refresh_token_as_access_token(self, client):
        register(client, "alice")
        _, refresh = session_tokens(client, "alice")
        res = client.get(
            f"{API}/users/current-user",
            headers={"Authorization": f"Bearer {refresh}"},
        )
        assert res.status_code == 401

    def test_bearer_token(self, client, make_user):
        headers, user = make_user("alice")
        res = client.get(f"{API}/users/current-user", headers=headers)
        assert res.status_code == 200
        assert res.json()["data"]["id"] == user["id"]

    def test_cookie_takes_precedence_over_header(self, client, make_user):
        bob_headers, _ = make_user("bob")
        register(client, "alice")
        client.post(f"{API}/users/login", json={"username": "alice", "password": PASSWORD})

        res = client.get(f"{API}/users/current-user", headers=bob_headers)

        assert res.json()["data"]["username"] == "alice"
        client.cookies.clear()


class TestAccount:
    def test_update_account(self, client, make_user):
        headers, _ = make_user("alice")
        res = client.put(
            f"{API}/users/update",
            json={"fullName": "Alice Liddell", "email": "ALICE@wonderland.org"},
            headers=headers,
        )
        assert res.status_code == 200
        data = res.json()["data"]
        assert data["fullName"] == "Alice Liddell"
        assert data["email"] == "alice@wonderland.org"

    def test_update_account_email_taken(self, client, make_user):
        headers, _ = make_user("alice")
        make_user("bob")
        res = client.put(f"{API}/users/update", json={"email": "bob@example.com"}, headers=headers)
        assert res.status_code == 409

    def test_update_account_needs_a_field(self, client, make_user):
        headers, _ = make_user("alice")
        res = client.put(f"{API}/users/update", json={}, headers=headers)
        assert res.status_code == 400

    def test_change_password(self, client, make_user, session_factory):
        headers, _ = make_user("alice")

        wrong = client.put(
            f"{API}/users/update-password",
            json={"oldPassword": "not-it", "newPassword": "brand-new-pass"},
            headers=headers,
        )
        assert wrong.status_code == 401

        res = client.put(
            f"{API}/users/update-password",
            json={"oldPassword": PASSWORD, "newPassword": "brand-new-pass"},
            headers=headers,
        )
        assert res.status_code == 200
        assert _stored_user(session_factory, "alice").refresh_token is None
        login(client, "alice", password="brand-new-pass")

    def test_new_password_over_bcrypt_byte_limit_rejected(self, client, make_user, session_factory):
        headers, _ = make_user("alice")
        before = _stored_user(session_factory, "alice").password_hash

        res = client.put(
            f"{API}/users/update-password",
            json={"oldPassword": PASSWORD, "newPassword": "é" * 40},
            headers=headers,
        )

        assert res.status_code == 400
        assert _stored_user(session_factory, "alice").password_hash == before
        login(client, "alice")

    def test_replace_avatar_discards_old_asset(self, client, make_user, assets):
        headers, user = make_user("alice")
        old_avatar = user["avatar"]

        res = client.put(
            f"{API}/users/avatar-cover",
            files={"avatar": ("new.png", b"new-avatar", "image/png")},
            headers=headers,
        )

        assert res.status_code == 200
        assert res.json()["data"]["avatar"] != old_avatar
        assert res.json()["data"]["avatar"] == assets.uploaded[-1].url
        assert assets.deleted == ["asset-1"]

    def test_replace_images_requires_a_file(self, client, make_user):
        headers, _ = make_user("alice")
        res = client.put(f"{API}/users/avatar-cover", headers=headers)
        assert res.status_code == 400

    def test_deactivate_and_reactivate(self, client, make_user):
        headers, _ = make_user("alice")

        res = client.put(f"{API}/users/deactivate", headers=headers)
        assert res.status_code == 200
        assert res.json()["data"]["isActive"] is False
        client.cookies.clear()

        assert client.get(f"{API}/users/current-user", headers=headers).status_code == 401
        blocked = client.post(f"{API}/users/login", json={"username": "alice", "password": PASSWORD})
        assert blocked.status_code == 403

        res = client.put(f"{API}/users/reactivate", json={"username": "alice", "password": PASSWORD})
        assert res.status_code == 200
        assert res.json()["data"]["isActive"] is True
        login(client, "alice")

    def test_reactivate_active_account(self, client, make_user):
        make_user("alice")
        res = client.put(f"{API}/users/reactivate", json={"username": "alice", "password": PASSWORD})
        assert res.status_code == 400


class TestChannel:
    def test_channel_profile(self, client, make_user):
        alice_headers, alice = make_user("alice")
        bob_headers, _ = make_user("bob")
        client.post(f"{API}/subscriptions/c/{alice['id']}", headers=bob_headers)

        res = client.get(f"{API}/users/channel/alice", headers=bob_headers)

        assert res.status_code == 200
        data = res.json()["data"]
        assert data["username"] == "alice"
        assert data["subscribersCount"] == 1
        assert data["subscribedToCount"] == 0
        assert data["isSubscribed"] is True

        anonymous = client.get(f"{API}/users/channel/alice").json()["data"]
        assert anonymous["isSubscribed"] is False

    def test_get_user_by_id(self, client, make_user):
        headers, alice = make_user("alice")

        res = client.get(f"{API}/users/{alice['id']}")

        assert res.status_code == 200
        data = res.json()["data"]
        assert data["id"] == alice["id"]
        assert data["username"] == "alice"
        for secret in ("password", "passwordHash", "refreshToken"):
            assert secret not in data

        client.put(f"{API}/users/deactivate", headers=headers)
        client.cookies.clear()
        assert client.get(f"{API}/users/{alice['id']}").status_code == 404

    def test_get_unknown_or_malformed_user(self, client):
        assert client.get(f"{API}/users/{uuid.uuid4().hex}").status_code == 404
        assert client.get(f"{API}/users/not-an-id").status_code == 400

    def test_unknown_channel(self, client):
        assert client.get(f"{API}/users/channel/nobody").status_code == 404

    def test_watch_history(self, client, make_user):
        alice_headers, _ = make_user("alice")
        bob_headers, _ = make_user("bob")
        first = upload_video(client, alice_headers, title="First")
        second = upload_video(client, alice_headers, title="Second")

        client.get(f"{API}/videos/{first['id']}", headers=bob_headers)
        client.get(f"{API}/videos/{second['id']}", headers=bob_headers)
        client.get(f"{API}/videos/{first['id']}", headers=bob_headers)

        res = client.get(f"{API}/users/history", headers=bob_headers)
        assert res.status_code == 200
        titles = [entry["video"]["title"] for entry in res.json()["data"]]
        assert titles == ["First", "Second"]
