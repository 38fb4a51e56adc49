"""End-to-end tests for the resource endpoints and the response envelopes."""

import uuid

import pytest


@pytest.mark.asyncio
async def test_healthcheck(client):
    response = await client.get("/api/v1/healthcheck")

    assert response.status_code == 200
    assert response.json() == {
        "statusCode": 200,
        "data": {"status": "OK"},
        "message": "Health check passed",
        "success": True,
    }


@pytest.mark.asyncio
async def test_unknown_route_uses_error_envelope(client):
    response = await client.get("/api/v1/nowhere")

    assert response.status_code == 404
    assert response.json()["success"] is False
    assert response.json()["errors"] == []


@pytest.mark.asyncio
async def test_invalid_query_is_bad_request(client):
    response = await client.get("/api/v1/videos", params={"page": 0})

    body = response.json()
    assert response.status_code == 400
    assert body["success"] is False
    assert body["errors"][0]["field"] == "page"


@pytest.mark.asyncio
async def test_video_publish_flow(client, make_user, auth_headers, media):
    owner = await make_user("ana")
    viewer = await make_user("ben")

    created = await client.post(
        "/api/v1/videos",
        data={"title": "My trip", "description": "Mountains"},
        files={
            "videoFile": ("trip.mp4", b"video-bytes", "video/mp4"),
            "thumbnail": ("trip.png", b"png-bytes", "image/png"),
        },
        headers=auth_headers(owner),
    )
    assert created.status_code == 201
    video = created.json()["data"]
    assert video["isPublished"] is False
    assert video["duration"] == 12.5
    assert video["videoFileUrl"] == "https://media.test/asset-1"

    # Drafts stay out of the listing and are hidden from others
    listing = await client.get("/api/v1/videos")
    assert listing.json()["data"]["items"] == []
    hidden = await client.get(f"/api/v1/videos/{video['id']}", headers=auth_headers(viewer))
    assert hidden.status_code == 404

    toggled = await client.patch(
        f"/api/v1/videos/toggle/publish/{video['id']}", headers=auth_headers(owner)
    )
    assert toggled.json()["data"] == {"isPublished": True}

    listing = (await client.get("/api/v1/videos", params={"limit": 5})).json()["data"]
    assert listing["totalCount"] == 1
    assert listing["limit"] == 5
    assert listing["items"][0]["owner"]["username"] == "ana"

    detail = await client.get(f"/api/v1/videos/{video['id']}", headers=auth_headers(viewer))
    assert detail.status_code == 200
    assert detail.json()["data"]["views"] == 1
    assert detail.json()["data"]["owner"]["subscribersCount"] == 0

    history = await client.get("/api/v1/users/history", headers=auth_headers(viewer))
    assert [v["id"] for v in history.json()["data"]] == [video["id"]]


@pytest.mark.asyncio
async def test_publish_requires_auth(client):
    response = await client.post("/api/v1/videos", data={"title": "t", "description": "d"})

    assert response.status_code == 401
    assert response.json()["message"] == "Unauthorized request"


@pytest.mark.asyncio
async def test_non_owner_gets_forbidden(client, make_user, make_video, auth_headers):
    owner = await make_user("ana")
    intruder = await make_user("ben")
    video = await make_video(owner, title="Mine")

    response = await client.patch(
        f"/api/v1/videos/{video.id}",
        data={"title": "Stolen", "description": "Stolen"},
        headers=auth_headers(intruder),
    )
    assert response.status_code == 403
    assert response.json()["success"] is False

    delete = await client.delete(f"/api/v1/videos/{video.id}", headers=auth_headers(intruder))
    assert delete.status_code == 403

    detail = await client.get(f"/api/v1/videos/{video.id}")
    assert detail.json()["data"]["title"] == "Mine"


@pytest.mark.asyncio
async def test_malformed_id_is_bad_request(client):
    response = await client.get("/api/v1/videos/not-an-id")

    assert response.status_code == 400
    assert response.json()["message"] == "videoId is invalid"


@pytest.mark.asyncio
async def test_like_toggle_round_trip(client, make_user, make_video, auth_headers):
    user = await make_user("ana")
    video = await make_video(user)

    first = await client.post(f"/api/v1/likes/toggle/v/{video.id}", headers=auth_headers(user))
    assert first.json()["data"] == {"isLiked": True}

    liked = await client.get("/api/v1/likes/videos", headers=auth_headers(user))
    assert [v["id"] for v in liked.json()["data"]] == [video.id]

    second = await client.post(f"/api/v1/likes/toggle/v/{video.id}", headers=auth_headers(user))
    assert second.json()["data"] == {"isLiked": False}

    liked = await client.get("/api/v1/likes/videos", headers=auth_headers(user))
    assert liked.json()["data"] == []


@pytest.mark.asyncio
async def test_comments_endpoints(client, make_user, make_video, auth_headers):
    owner = await make_user("ana")
    video = await make_video(owner)

    for text in ("one", "two", "three"):
        created = await client.post(
            f"/api/v1/comments/{video.id}", json={"content": text}, headers=auth_headers(owner)
        )
        assert created.status_code == 201

    page = (
        await client.get(f"/api/v1/comments/{video.id}", params={"page": 2, "limit": 2})
    ).json()["data"]
    assert [c["content"] for c in page["items"]] == ["one"]
    assert page["totalPages"] == 2
    assert page["hasPrevPage"] is True

    newest = (await client.get(f"/api/v1/comments/{video.id}")).json()["data"]["items"][0]
    edited = await client.patch(
        f"/api/v1/comments/c/{newest['id']}",
        json={"content": "three!"},
        headers=auth_headers(owner),
    )
    assert edited.json()["data"]["content"] == "three!"

    deleted = await client.delete(
        f"/api/v1/comments/c/{newest['id']}", headers=auth_headers(owner)
    )
    assert deleted.json()["data"] == {"commentId": newest["id"]}


@pytest.mark.asyncio
async def test_comment_requires_content(client, make_user, make_video, auth_headers):
    owner = await make_user("ana")
    video = await make_video(owner)

    response = await client.post(
        f"/api/v1/comments/{video.id}", json={"content": "   "}, headers=auth_headers(owner)
    )
    assert response.status_code == 400
    assert response.json()["message"] == "content is required"


@pytest.mark.asyncio
async def test_video_delete_removes_comments_from_listings(
    client, make_user, make_video, auth_headers, media
):
    owner = await make_user("ana")
    video = await make_video(owner, title="Gone")
    await client.post(
        f"/api/v1/comments/{video.id}", json={"content": "hi"}, headers=auth_headers(owner)
    )
    await client.post(f"/api/v1/likes/toggle/v/{video.id}", headers=auth_headers(owner))

    response = await client.delete(f"/api/v1/videos/{video.id}", headers=auth_headers(owner))
    assert response.status_code == 200

    assert (await client.get(f"/api/v1/comments/{video.id}")).status_code == 404
    liked = await client.get("/api/v1/likes/videos", headers=auth_headers(owner))
    assert liked.json()["data"] == []
    assert ("file-Gone", "video") in media.deleted


@pytest.mark.asyncio
async def test_tweets_endpoints(client, make_user, auth_headers):
    author = await make_user("ana")
    fan = await make_user("ben")

    created = await client.post(
        "/api/v1/tweets", json={"content": "hello world"}, headers=auth_headers(author)
    )
    assert created.status_code == 201
    tweet_id = created.json()["data"]["id"]

    await client.post(f"/api/v1/likes/toggle/t/{tweet_id}", headers=auth_headers(fan))

    tweets = (
        await client.get(f"/api/v1/tweets/user/{author.id}", headers=auth_headers(fan))
    ).json()["data"]
    assert tweets[0]["likesCount"] == 1
    assert tweets[0]["isLiked"] is True
    assert tweets[0]["owner"]["username"] == "ana"

    forbidden = await client.delete(f"/api/v1/tweets/{tweet_id}", headers=auth_headers(fan))
    assert forbidden.status_code == 403

    deleted = await client.delete(f"/api/v1/tweets/{tweet_id}", headers=auth_headers(author))
    assert deleted.json()["data"] == {"tweetId": tweet_id}


@pytest.mark.asyncio
async def test_playlist_endpoints(client, make_user, make_video, auth_headers):
    owner = await make_user("ana")
    video = await make_video(owner, views=4)

    created = await client.post(
        "/api/v1/playlist",
        json={"name": "Road trip", "description": "Songs"},
        headers=auth_headers(owner),
    )
    assert created.status_code == 201
    playlist_id = created.json()["data"]["id"]

    added = await client.patch(
        f"/api/v1/playlist/add/{video.id}/{playlist_id}", headers=auth_headers(owner)
    )
    assert added.json()["data"]["videos"] == [video.id]

    detail = (await client.get(f"/api/v1/playlist/{playlist_id}")).json()["data"]
    assert detail["totalVideos"] == 1
    assert detail["totalViews"] == 4
    assert detail["videos"][0]["id"] == video.id

    summaries = (await client.get(f"/api/v1/playlist/user/{owner.id}")).json()["data"]
    assert [p["name"] for p in summaries] == ["Road trip"]

    removed = await client.patch(
        f"/api/v1/playlist/remove/{video.id}/{playlist_id}", headers=auth_headers(owner)
    )
    assert removed.json()["data"]["videos"] == []

    deleted = await client.delete(f"/api/v1/playlist/{playlist_id}", headers=auth_headers(owner))
    assert deleted.status_code == 200
    assert (await client.get(f"/api/v1/playlist/{playlist_id}")).status_code == 404


@pytest.mark.asyncio
async def test_subscription_endpoints(client, make_user, auth_headers):
    ana = await make_user("ana")
    ben = await make_user("ben")

    toggled = await client.post(f"/api/v1/subscriptions/c/{ben.id}", headers=auth_headers(ana))
    assert toggled.json()["data"] == {"isSubscribed": True}

    subscribers = (await client.get(f"/api/v1/subscriptions/c/{ben.id}")).json()["data"]
    assert [s["username"] for s in subscribers] == ["ana"]

    channels = (await client.get(f"/api/v1/subscriptions/u/{ana.id}")).json()["data"]
    assert [c["username"] for c in channels] == ["ben"]
    assert channels[0]["subscribersCount"] == 1

    profile = (
        await client.get("/api/v1/users/c/ben", headers=auth_headers(ana))
    ).json()["data"]
    assert profile["subscribersCount"] == 1
    assert profile["isSubscribed"] is True

    own = await client.post(f"/api/v1/subscriptions/c/{ana.id}", headers=auth_headers(ana))
    assert own.status_code == 400

    missing = await client.post(
        f"/api/v1/subscriptions/c/{uuid.uuid4()}", headers=auth_headers(ana)
    )
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_update_account_endpoint(client, make_user, auth_headers):
    user = await make_user("ana")

    response = await client.patch(
        "/api/v1/users/update-account",
        json={"fullName": "Ana B", "email": "ana.b@example.com"},
        headers=auth_headers(user),
    )

    assert response.status_code == 200
    assert response.json()["data"]["email"] == "ana.b@example.com"


@pytest.mark.asyncio
async def test_avatar_endpoint(client, make_user, auth_headers, media):
    user = await make_user("ana")

    response = await client.patch(
        "/api/v1/users/avatar",
        files={"avatar": ("new.png", b"png-bytes", "image/png")},
        headers=auth_headers(user),
    )

    assert response.status_code == 200
    assert response.json()["data"]["avatarUrl"] == "https://media.test/asset-1"
    assert media.deleted == [("avatar-ana", "image")]
