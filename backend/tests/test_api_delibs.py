"""API tests for deliberation sessions, voting and results."""

from recruitflow.models.organization import ROLE_ADMIN, ROLE_MEMBER, ROLE_OWNER
from tests.conftest import (
    make_applicant,
    make_applicant_round,
    make_cycle,
    make_org,
    make_round,
    make_user,
    user_headers,
)


def _env(db):
    org = make_org(db)
    owner = make_user(db, org, role=ROLE_OWNER)
    member = make_user(db, org, role=ROLE_MEMBER)
    cycle = make_cycle(db, org)
    rnd = make_round(db, cycle, 0)
    ars = [make_applicant_round(db, make_applicant(db, cycle, name=n), rnd) for n in ("Ana", "Ben", "Cy", "Di")]
    return org, owner, member, rnd, ars


def test_vote_and_rank(client, db):
    org, owner, member, rnd, ars = _env(db)
    session = client.post(
        "/api/v1/delibs/sessions", json={"recruitment_round_id": rnd.id}, headers=user_headers(member)
    )
    assert session.status_code == 200, session.text
    session_id = session.json()["session"]["id"]

    admin = make_user(db, org, role=ROLE_ADMIN)
    votes = [(owner, ars[0], 5), (owner, ars[1], 5), (member, ars[2], 5), (member, ars[0], 5)]
    votes += [(admin, ars[2], -5), (admin, ars[3], -5)]
    for voter, ar, value in votes:
        resp = client.post(
            "/api/v1/delibs/votes",
            json={"delibs_session_id": session_id, "applicant_round_id": ar.id, "vote_value": value},
            headers=user_headers(voter),
        )
        assert resp.status_code == 200, resp.text

    forbidden = client.get(f"/api/v1/delibs/rounds/{rnd.id}/results", headers=user_headers(member))
    assert forbidden.status_code == 403

    results = client.get(f"/api/v1/delibs/rounds/{rnd.id}/results", headers=user_headers(owner))
    assert results.status_code == 200, results.text
    body = results.json()
    # Ana 5, Ben 5, Cy 0, Di -5
    assert [r["name"] for r in body["results"]] == ["Ana", "Ben", "Cy", "Di"]
    assert [r["rank_dense"] for r in body["results"]] == [1, 1, 2, 3]
    assert [r["is_tied"] for r in body["results"]] == [True, True, False, False]
    assert body["total_members"] == 3
    assert body["is_last_round"] is True

    listing = client.get(f"/api/v1/delibs/rounds/{rnd.id}/applicants", headers=user_headers(member))
    assert listing.json()["voted_count"] == 2
    assert listing.json()["total_count"] == 4


def test_invalid_vote_and_lock(client, db):
    org, owner, member, rnd, ars = _env(db)
    session_id = client.post(
        "/api/v1/delibs/sessions", json={"recruitment_round_id": rnd.id}, headers=user_headers(owner)
    ).json()["session"]["id"]

    bad = client.post(
        "/api/v1/delibs/votes",
        json={"delibs_session_id": session_id, "applicant_round_id": ars[0].id, "vote_value": 3},
        headers=user_headers(member),
    )
    assert bad.status_code == 400

    member_lock = client.patch(
        f"/api/v1/delibs/sessions/{session_id}", json={"action": "lock"}, headers=user_headers(member)
    )
    assert member_lock.status_code == 403

    lock = client.patch(
        f"/api/v1/delibs/sessions/{session_id}", json={"action": "lock"}, headers=user_headers(owner)
    )
    assert lock.json()["status"] == "locked"

    blocked = client.post(
        "/api/v1/delibs/votes",
        json={"delibs_session_id": session_id, "applicant_round_id": ars[0].id, "vote_value": 5},
        headers=user_headers(member),
    )
    assert blocked.status_code == 403
    assert blocked.json()["error"] == "Session is locked"


def test_my_vote_endpoint(client, db):
    org, owner, member, rnd, ars = _env(db)
    session_id = client.post(
        "/api/v1/delibs/sessions", json={"recruitment_round_id": rnd.id}, headers=user_headers(member)
    ).json()["session"]["id"]
    params = {"delibs_session_id": session_id, "applicant_round_id": ars[1].id}

    assert client.get("/api/v1/delibs/votes/me", params=params, headers=user_headers(member)).json()["vote"] is None
    client.post("/api/v1/delibs/votes", json={**params, "vote_value": 10}, headers=user_headers(member))
    mine = client.get("/api/v1/delibs/votes/me", params=params, headers=user_headers(member)).json()
    assert mine["vote"]["vote_value"] == 10

    assert client.delete("/api/v1/delibs/votes", params=params, headers=user_headers(member)).status_code == 200
