"""API tests for metric sets and score submissions."""

from recruitflow.models.organization import ROLE_MEMBER
from tests.conftest import make_user, setup_scoring_environment, user_headers


def _submit(client, env, values, headers=None):
    return client.post(
        "/api/v1/scores",
        json={
            "applicant_id": env["applicant"].id,
            "recruitment_round_id": env["round"].id,
            "scores": [
                {"metric_id": mid, "score_value": value, "weight": 0.5}
                for mid, value in zip(env["metric_ids"], values)
            ],
        },
        headers=headers or user_headers(env["user"]),
    )


def test_submit_and_fetch_scores(client, db):
    env = setup_scoring_environment(db)
    resp = _submit(client, env, [8, 4])
    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert abs(body["weighted_score"] - 6.4) < 1e-9
    assert len(body["scores"]) == 2

    fetched = client.get(
        f"/api/v1/applicant-rounds/{env['applicant_round'].id}/scores",
        headers=user_headers(env["user"]),
    )
    assert fetched.status_code == 200, fetched.text
    submissions = fetched.json()["submissions"]
    assert len(submissions) == 1
    assert submissions[0]["user"]["name"] == "You"
    assert submissions[0]["submission_id"] == body["submission_id"]


def test_update_and_delete_submission(client, db):
    env = setup_scoring_environment(db)
    body = _submit(client, env, [8, 4]).json()
    headers = user_headers(env["user"])

    patch = client.patch(f"/api/v1/scores/{body['scores'][0]['id']}", json={"score_value": 10}, headers=headers)
    assert patch.status_code == 200, patch.text
    assert abs(patch.json()["weighted_average"] - 7.6) < 1e-9

    other = make_user(db, env["org"], role=ROLE_MEMBER)
    forbidden = client.delete(f"/api/v1/scores/submissions/{body['submission_id']}", headers=user_headers(other))
    assert forbidden.status_code == 403
    assert forbidden.json()["code"] == "FORBIDDEN"

    deleted = client.delete(f"/api/v1/scores/submissions/{body['submission_id']}", headers=headers)
    assert deleted.status_code == 200
    assert deleted.json() == {"success": True}


def test_score_checks(client, db):
    env = setup_scoring_environment(db)
    headers = user_headers(env["user"])
    check = client.get(f"/api/v1/rounds/{env['round'].id}/scores/check", headers=headers)
    assert check.json() == {"has_scores": False, "count": 0}

    _submit(client, env, [1, 1])
    applicant_check = client.get(
        "/api/v1/scores/check",
        params={"applicant_id": env["applicant"].id, "recruitment_round_id": env["round"].id},
        headers=headers,
    )
    assert applicant_check.json() == {"has_score": True}


def test_metrics_replace_contract(client, db):
    env = setup_scoring_environment(db)
    headers = user_headers(env["user"])
    url = f"/api/v1/rounds/{env['round'].id}/metrics"

    bad = client.put(url, json={"metrics": [{"name": "a", "weight": 0.5}]}, headers=headers)
    assert bad.status_code == 400
    assert bad.json()["code"] == "VALIDATION_ERROR"

    ok = client.put(url, json={"metrics": [{"name": "a", "weight": 0.5}, {"name": "b", "weight": 0.5}]}, headers=headers)
    assert ok.status_code == 200, ok.text
    assert [m["name"] for m in ok.json()["metrics"]] == ["a", "b"]

    listed = client.get(url, headers=headers)
    assert [m["weight"] for m in listed.json()["metrics"]] == [0.5, 0.5]


def test_metrics_replace_conflict_after_scoring(client, db):
    env = setup_scoring_environment(db)
    _submit(client, env, [3, 3])
    resp = client.put(
        f"/api/v1/rounds/{env['round'].id}/metrics",
        json={"metrics": [{"name": "x", "weight": 1.0}]},
        headers=user_headers(env["user"]),
    )
    assert resp.status_code == 400
    assert resp.json()["code"] == "CONFLICT"

    cleared = client.delete(f"/api/v1/rounds/{env['round'].id}/scores", headers=user_headers(env["user"]))
    assert cleared.json() == {"success": True, "deleted": 2}


def test_missing_bridging_row_is_404(client, db):
    env = setup_scoring_environment(db)
    resp = client.post(
        "/api/v1/scores",
        json={
            "applicant_id": env["applicant"].id,
            "recruitment_round_id": env["next_round"].id,
            "scores": [{"metric_id": env["metric_ids"][0], "score_value": 1}],
        },
        headers=user_headers(env["user"]),
    )
    assert resp.status_code == 404
    assert resp.json()["code"] == "NOT_FOUND"
