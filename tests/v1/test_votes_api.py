from fastapi.testclient import TestClient

VOTES_URL = "/api/v1/votes/"


def _score(client: TestClient, post_id: int) -> int:
    return client.get(f"/api/v1/posts/{post_id}").json()["score"]


def test_vote_requires_session(client: TestClient, test_post) -> None:
    response = client.post(VOTES_URL, json={"postId": test_post.id, "value": 1})
    assert response.status_code == 401


def test_vote_rejects_bad_value(client: TestClient, test_post, other_user, login_as) -> None:
    login_as(other_user)
    response = client.post(VOTES_URL, json={"postId": test_post.id, "value": 3})
    assert response.status_code == 422


def test_vote_missing_post(client: TestClient, other_user, login_as) -> None:
    login_as(other_user)
    response = client.post(VOTES_URL, json={"postId": 99999, "value": 1})
    assert response.status_code == 404


def test_upvote_flip_and_repeat(client: TestClient, test_post, other_user, login_as) -> None:
    login_as(other_user)

    response = client.post(VOTES_URL, json={"postId": test_post.id, "value": 1})
    assert response.status_code == 200
    assert response.json() is True
    assert _score(client, test_post.id) == 1

    client.post(VOTES_URL, json={"postId": test_post.id, "value": -1})
    assert _score(client, test_post.id) == -1

    client.post(VOTES_URL, json={"postId": test_post.id, "value": -1})
    post = client.get(f"/api/v1/posts/{test_post.id}").json()
    assert post["score"] == -1
    assert post["voteStatus"] == -1


def test_votes_from_several_users(
    client: TestClient, test_post, test_user, other_user, login_as
) -> None:
    login_as(test_user)
    client.post(VOTES_URL, json={"postId": test_post.id, "value": 1})
    login_as(other_user)
    client.post(VOTES_URL, json={"postId": test_post.id, "value": 1})

    feed = client.get("/api/v1/posts/").json()
    assert feed["posts"][0]["score"] == 2
    assert feed["posts"][0]["voteStatus"] == 1
