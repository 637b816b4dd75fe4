"""API tests for anonymous readings and the comments left through them."""

from tests.conftest import make_user, setup_scoring_environment, user_headers


def _create_reading(client, env, omitted=()):
    resp = client.post(
        "/api/v1/anonymous/readings",
        json={"recruitment_round_id": env["round"].id, "omitted_fields": list(omitted)},
        headers=user_headers(env["user"]),
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["reading"]


def test_reading_round_trip(client, db):
    env = setup_scoring_environment(db)
    headers = user_headers(env["user"])
    reading = _create_reading(client, env, omitted=["major"])

    slug = client.get(f"/api/v1/anonymous/rounds/{env['round'].id}/slug", headers=headers)
    assert slug.json() == {"slug": reading["slug"]}

    view = client.get(f"/api/v1/anonymous/readings/{reading['slug']}", headers=headers)
    assert view.status_code == 200
    body = view.json()
    assert body["recruitment_round_name"] == "Interview"
    assert body["applicants"][0]["applicant_round_id"] == env["applicant_round"].id
    assert body["applicants"][0]["data"] == {}


def test_missing_slug_is_404(client, db):
    env = setup_scoring_environment(db)
    resp = client.get(f"/api/v1/anonymous/rounds/{env['round'].id}/slug", headers=user_headers(env["user"]))
    assert resp.status_code == 404
    assert resp.json()["code"] == "NOT_FOUND"


def test_outsider_cannot_open_reading(client, db):
    env = setup_scoring_environment(db)
    reading = _create_reading(client, env)
    outsider = make_user(db)
    resp = client.get(f"/api/v1/anonymous/readings/{reading['slug']}", headers=user_headers(outsider))
    assert resp.status_code == 403


def test_reading_blocks_round_deletion(client, db):
    env = setup_scoring_environment(db)
    headers = user_headers(env["user"])
    client.post(
        "/api/v1/anonymous/readings",
        json={"recruitment_round_id": env["next_round"].id},
        headers=headers,
    )
    blocked = client.delete(f"/api/v1/rounds/{env['next_round'].id}", headers=headers)
    assert blocked.status_code == 400
    assert "anonymous readings" in blocked.json()["error"]

    slug = client.get(f"/api/v1/anonymous/rounds/{env['next_round'].id}/slug", headers=headers).json()["slug"]
    assert client.delete(f"/api/v1/anonymous/readings/{slug}", headers=headers).status_code == 200
    assert client.delete(f"/api/v1/rounds/{env['next_round'].id}", headers=headers).status_code == 200


def test_anonymous_comment_flow(client, db):
    env = setup_scoring_environment(db)
    headers = user_headers(env["user"])
    created = client.post(
        "/api/v1/anonymous/comments",
        json={
            "applicant_id": env["applicant"].id,
            "recruitment_round_id": env["round"].id,
            "comment_text": "Strong written answers",
        },
        headers=headers,
    )
    assert created.status_code == 201, created.text
    assert created.json()["source"] == "A"

    mine = client.get(
        "/api/v1/anonymous/comments",
        params={"applicant_id": env["applicant"].id, "recruitment_round_id": env["round"].id},
        headers=headers,
    )
    assert [c["comment_text"] for c in mine.json()["comments"]] == ["Strong written answers"]

    other = make_user(db, env["org"])
    denied = client.delete(f"/api/v1/anonymous/comments/{created.json()['id']}", headers=user_headers(other))
    assert denied.status_code == 403
    assert client.delete(f"/api/v1/anonymous/comments/{created.json()['id']}", headers=headers).status_code == 200
