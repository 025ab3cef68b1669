"""Request helpers shared by the API tests"""

API = "/api/v1"
PASSWORD = "password123"


def register(client, username, email=None, password=PASSWORD, cover=False):
    data = {
        "fullName": f"{username.title()} Tester",
        "email": email or f"{username}@example.com",
        "username": username,
        "password": password,
    }
    files = {"avatar": ("avatar.png", b"avatar-bytes", "image/png")}
    if cover:
        files["coverImage"] = ("cover.jpg", b"cover-bytes", "image/jpeg")
    return client.post(f"{API}/users/register", data=data, files=files)


def login(client, username, password=PASSWORD):
    """Log in and return bearer headers plus the login payload; cookies are dropped"""
    res = client.post(f"{API}/users/login", json={"username": username, "password": password})
    assert res.status_code == 200, res.text
    client.cookies.clear()
    data = res.json()["data"]
    return {"Authorization": f"Bearer {data['accessToken']}"}, data


def session_tokens(client, username, password=PASSWORD):
    """Log in and return the (access, refresh) tokens from the session cookies; cookies are dropped"""
    res = client.post(f"{API}/users/login", json={"username": username, "password": password})
    assert res.status_code == 200, res.text
    tokens = res.cookies["accessToken"], res.cookies["refreshToken"]
    client.cookies.clear()
    return tokens


def upload_video(client, headers, title="My video", description="Some description"):
    res = client.post(
        f"{API}/videos",
        data={"title": title, "description": description},
        files={
            "videoFile": ("clip.mp4", b"video-bytes", "video/mp4"),
            "thumbnail": ("thumb.png", b"thumb-bytes", "image/png"),
        },
        headers=headers,
    )
    assert res.status_code == 201, res.text
    return res.json()["data"]


def create_tweet(client, headers, content="Hello world"):
    res = client.post(f"{API}/tweets", json={"content": content}, headers=headers)
    assert res.status_code == 201, res.text
    return res.json()["data"]


def add_comment(client, headers, video_id, content="Nice video"):
    res = client.post(f"{API}/comments/video/{video_id}", json={"content": content}, headers=headers)
    assert res.status_code == 201, res.text
    return res.json()["data"]


def create_playlist(client, headers, name="Favourites", description="Videos I like"):
    res = client.post(f"{API}/playlists", json={"name": name, "description": description}, headers=headers)
    assert res.status_code == 201, res.text
    return res.json()["data"]
