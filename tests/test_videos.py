import uuid

from sqlalchemy import func, select

from helpers import API, add_comment, create_playlist, upload_video
from videotube.db.models.comment import Comment
from videotube.db.models.like import Like
from videotube.db.models.playlist import PlaylistVideo
from videotube.db.models.user import WatchHistory
from videotube.db.models.video import Video


def _count(session_factory, column, *criteria):
    with session_factory() as db:
        return db.scalar(select(func.count(column)).where(*criteria))


def test_publish_video(client, make_user, assets):
    headers, user = make_user("alice")

    video = upload_video(client, headers, title="  Cats  ")

    assert video["ownerId"] == user["id"]
    assert video["title"] == "Cats"
    assert video["duration"] == 42.0
    assert video["views"] == 0
    assert video["isPublished"] is True
    assert video["videoUrl"] == assets.uploaded[-2].url
    assert video["thumbnailUrl"] == assets.uploaded[-1].url


def test_publish_requires_files(client, make_user):
    headers, _ = make_user("alice")
    res = client.post(
        f"{API}/videos",
        data={"title": "Cats", "description": "Cute"},
        files={"videoFile": ("clip.mp4", b"video-bytes", "video/mp4")},
        headers=headers,
    )
    assert res.status_code == 400


def test_publish_requires_title(client, make_user, assets):
    headers, _ = make_user("alice")
    res = client.post(
        f"{API}/videos",
        data={"description": "Cute"},
        files={
            "videoFile": ("clip.mp4", b"video-bytes", "video/mp4"),
            "thumbnail": ("thumb.png", b"thumb-bytes", "image/png"),
        },
        headers=headers,
    )
    assert res.status_code == 400
    # only the avatar was uploaded
    assert len(assets.uploaded) == 1


def test_failed_thumbnail_upload_discards_video_asset(client, make_user, assets, session_factory):
    headers, _ = make_user("alice")
    assets.fail_on_upload = 3  # avatar, video file, thumbnail

    res = client.post(
        f"{API}/videos",
        data={"title": "Cats", "description": "Cute"},
        files={
            "videoFile": ("clip.mp4", b"video-bytes", "video/mp4"),
            "thumbnail": ("thumb.png", b"thumb-bytes", "image/png"),
        },
        headers=headers,
    )

    assert res.status_code == 500
    assert assets.deleted == ["asset-2"]
    assert _count(session_factory, Video.id) == 0


def test_publish_requires_auth(client):
    res = client.post(f"{API}/videos", data={"title": "Cats", "description": "Cute"})
    assert res.status_code == 401


def test_watch_counts_views(client, make_user):
    headers, _ = make_user("alice")
    video = upload_video(client, headers)

    client.get(f"{API}/videos/{video['id']}")
    res = client.get(f"{API}/videos/{video['id']}")

    assert res.status_code == 200
    data = res.json()["data"]
    assert data["views"] == 2
    assert data["likesCount"] == 0
    assert data["isLiked"] is False
    assert data["owner"]["username"] == "alice"
    assert data["owner"]["subscribersCount"] == 0


def test_watch_with_malformed_or_unknown_id(client):
    assert client.get(f"{API}/videos/not-an-id").status_code == 400
    assert client.get(f"{API}/videos/{uuid.uuid4().hex}").status_code == 404


def test_unpublished_video_only_visible_to_owner(client, make_user):
    alice_headers, _ = make_user("alice")
    bob_headers, _ = make_user("bob")
    video = upload_video(client, alice_headers)

    res = client.patch(f"{API}/videos/toggle/publish/{video['id']}", headers=alice_headers)
    assert res.status_code == 200
    assert res.json()["data"]["isPublished"] is False

    assert client.get(f"{API}/videos/{video['id']}").status_code == 404
    assert client.get(f"{API}/videos/{video['id']}", headers=bob_headers).status_code == 404
    assert client.get(f"{API}/videos/{video['id']}", headers=alice_headers).status_code == 200

    public = client.get(f"{API}/videos").json()["data"]
    assert public["totalDocs"] == 0
    own = client.get(f"{API}/videos", headers=alice_headers).json()["data"]
    assert own["totalDocs"] == 1


def test_list_videos_paging_and_sorting(client, make_user):
    alice_headers, alice = make_user("alice")
    bob_headers, _ = make_user("bob")
    for title in ("b-video", "a-video", "c-video"):
        upload_video(client, alice_headers, title=title)
    upload_video(client, bob_headers, title="bob-video")

    res = client.get(f"{API}/videos", params={"userId": alice["id"], "sortBy": "title", "sortType": "asc", "limit": 2})

    assert res.status_code == 200
    page = res.json()["data"]
    assert [v["title"] for v in page["docs"]] == ["a-video", "b-video"]
    assert page["totalDocs"] == 3
    assert page["totalPages"] == 2
    assert page["hasNextPage"] is True
    assert page["hasPrevPage"] is False
    assert page["docs"][0]["owner"]["username"] == "alice"

    second = client.get(
        f"{API}/videos",
        params={"userId": alice["id"], "sortBy": "title", "sortType": "asc", "limit": 2, "page": 2},
    ).json()["data"]
    assert [v["title"] for v in second["docs"]] == ["c-video"]
    assert second["hasNextPage"] is False


def test_list_videos_page_past_end_is_empty(client, make_user):
    headers, _ = make_user("alice")
    upload_video(client, headers)

    res = client.get(f"{API}/videos", params={"page": 100})

    assert res.status_code == 200
    page = res.json()["data"]
    assert page["docs"] == []
    assert page["totalDocs"] == 1
    assert page["page"] == 100


def test_list_videos_rejects_bad_parameters(client):
    assert client.get(f"{API}/videos", params={"sortBy": "password"}).status_code == 400
    assert client.get(f"{API}/videos", params={"sortType": "sideways"}).status_code == 400
    assert client.get(f"{API}/videos", params={"userId": "nope"}).status_code == 400
    assert client.get(f"{API}/videos", params={"limit": 0}).status_code == 400


def test_update_video_details(client, make_user):
    headers, _ = make_user("alice")
    video = upload_video(client, headers)

    res = client.patch(f"{API}/videos/{video['id']}", data={"title": "Renamed"}, headers=headers)

    assert res.status_code == 200
    assert res.json()["data"]["title"] == "Renamed"
    assert res.json()["data"]["description"] == "Some description"


def test_update_video_thumbnail_discards_old_one(client, make_user, assets):
    headers, _ = make_user("alice")
    video = upload_video(client, headers)
    old_thumbnail = assets.uploaded[-1]

    res = client.patch(
        f"{API}/videos/{video['id']}",
        files={"thumbnail": ("new.png", b"new-thumb", "image/png")},
        headers=headers,
    )

    assert res.status_code == 200
    assert res.json()["data"]["thumbnailUrl"] == assets.uploaded[-1].url
    assert assets.deleted == [old_thumbnail.asset_id]


def test_update_video_needs_a_change(client, make_user):
    headers, _ = make_user("alice")
    video = upload_video(client, headers)
    res = client.patch(f"{API}/videos/{video['id']}", headers=headers)
    assert res.status_code == 400


def test_non_owner_cannot_modify_video(client, make_user, session_factory, assets):
    alice_headers, _ = make_user("alice")
    bob_headers, _ = make_user("bob")
    video = upload_video(client, alice_headers)

    update = client.patch(f"{API}/videos/{video['id']}", data={"title": "Hijacked"}, headers=bob_headers)
    delete = client.delete(f"{API}/videos/{video['id']}", headers=bob_headers)
    toggle = client.patch(f"{API}/videos/toggle/publish/{video['id']}", headers=bob_headers)

    assert update.status_code == 403
    assert delete.status_code == 403
    assert toggle.status_code == 403
    with session_factory() as db:
        stored = db.get(Video, video["id"])
        assert stored.title == "My video"
        assert stored.is_published is True
    assert assets.deleted == []


def test_non_owner_thumbnail_is_not_kept(client, make_user, assets):
    alice_headers, _ = make_user("alice")
    bob_headers, _ = make_user("bob")
    video = upload_video(client, alice_headers)

    res = client.patch(
        f"{API}/videos/{video['id']}",
        files={"thumbnail": ("new.png", b"new-thumb", "image/png")},
        headers=bob_headers,
    )

    assert res.status_code == 403
    assert assets.deleted == []


def test_delete_video_removes_dependents(client, make_user, session_factory, assets):
    alice_headers, _ = make_user("alice")
    bob_headers, _ = make_user("bob")
    video = upload_video(client, alice_headers)
    video_assets = [a.asset_id for a in assets.uploaded[-2:]]
    comment = add_comment(client, bob_headers, video["id"])
    client.post(f"{API}/likes/toggle/video/{video['id']}", headers=bob_headers)
    client.post(f"{API}/likes/toggle/comment/{comment['id']}", headers=bob_headers)
    client.get(f"{API}/videos/{video['id']}", headers=bob_headers)
    playlist = create_playlist(client, bob_headers)
    client.patch(f"{API}/playlists/{playlist['id']}/add/{video['id']}", headers=bob_headers)

    res = client.delete(f"{API}/videos/{video['id']}", headers=alice_headers)

    assert res.status_code == 200
    assert res.json()["data"] == {"videoId": video["id"]}
    assert _count(session_factory, Video.id) == 0
    assert _count(session_factory, Comment.id) == 0
    assert _count(session_factory, Like.id) == 0
    assert _count(session_factory, PlaylistVideo.id) == 0
    assert _count(session_factory, WatchHistory.id) == 0
    assert sorted(assets.deleted) == sorted(video_assets)
    assert client.get(f"{API}/videos/{video['id']}").status_code == 404
