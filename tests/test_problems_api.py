from sqlmodel import select

from arena.models import Submission, TestCase

NEW_PROBLEM = {
    "title": "Echo",
    "description": "Print the input.",
    "constraints": "len <= 100",
    "sample_input": "hi",
    "sample_output": "hi",
    "test_cases": [{"input": "hi", "expected_output": "hi"}],
}


def test_problem_routes_require_login(client):
    assert client.get("/api/problems").status_code == 401
    assert client.get("/api/problems/1").status_code == 401


def test_list_problems_newest_first_with_solved_flag(client, as_admin, register, sum_problem):
    as_admin()
    second = client.post("/api/problems", json=NEW_PROBLEM).json()

    register("alice")
    assert client.post("/api/submissions", json={
        "code": "good", "language": "python", "problem_id": sum_problem["id"],
    }).status_code == 201

    problems = client.get("/api/problems").json()
    assert [p["id"] for p in problems] == [second["id"], sum_problem["id"]]
    assert [p["solved"] for p in problems] == [False, True]


def test_detail_masks_hidden_cases_for_users(client, register, sum_problem):
    register("alice")

    response = client.get(f"/api/problems/{sum_problem['id']}")
    assert response.status_code == 200
    detail = response.json()
    assert detail["marks"] == 40
    visible, hidden = detail["test_cases"]
    assert (visible["input"], visible["expected_output"]) == ("1 2", "3")
    assert hidden["is_hidden"] is True
    assert (hidden["input"], hidden["expected_output"]) == ("Hidden", "Hidden")


def test_detail_is_unmasked_for_admin(client, as_admin, sum_problem):
    as_admin()
    hidden = client.get(f"/api/problems/{sum_problem['id']}").json()["test_cases"][1]
    assert hidden["input"] == "5 7"


def test_unknown_problem_is_404(client, register):
    register("alice")
    response = client.get("/api/problems/999")
    assert response.status_code == 404
    assert response.json() == {"message": "Problem not found"}


def test_create_requires_admin(client, register):
    register("alice")
    response = client.post("/api/problems", json=NEW_PROBLEM)
    assert response.status_code == 403
    assert response.json() == {"message": "Admin access required"}


def test_create_defaults_marks_and_hidden_flag(client, as_admin):
    as_admin()
    created = client.post("/api/problems", json=NEW_PROBLEM)
    assert created.status_code == 201
    assert created.json()["marks"] == 25

    detail = client.get(f"/api/problems/{created.json()['id']}").json()
    assert detail["test_cases"][0]["is_hidden"] is True


def test_create_validates_fields(client, as_admin):
    as_admin()
    response = client.post("/api/problems", json={**NEW_PROBLEM, "title": ""})
    assert response.status_code == 400
    assert response.json()["field"] == "title"

    response = client.post("/api/problems", json={**NEW_PROBLEM, "marks": 0})
    assert response.status_code == 400


def test_update_is_partial_and_replaces_test_cases(client, as_admin, sum_problem):
    as_admin()
    pid = sum_problem["id"]

    response = client.put(f"/api/problems/{pid}", json={"marks": 60})
    assert response.status_code == 200
    assert response.json()["marks"] == 60
    assert response.json()["title"] == "A + B"
    assert len(client.get(f"/api/problems/{pid}").json()["test_cases"]) == 2

    response = client.put(f"/api/problems/{pid}", json={
        "test_cases": [{"input": "2 2", "expected_output": "4", "is_hidden": False}],
    })
    assert response.status_code == 200
    cases = client.get(f"/api/problems/{pid}").json()["test_cases"]
    assert [(c["input"], c["expected_output"]) for c in cases] == [("2 2", "4")]


def test_update_unknown_problem_is_404(client, as_admin):
    as_admin()
    assert client.put("/api/problems/999", json={"marks": 10}).status_code == 404


def test_delete_removes_problem_cases_and_submissions(client, as_admin, register, sum_problem, session):
    pid = sum_problem["id"]
    register("alice")
    client.post("/api/submissions", json={"code": "good", "language": "python", "problem_id": pid})

    assert client.delete(f"/api/problems/{pid}").status_code == 403

    as_admin()
    assert client.delete(f"/api/problems/{pid}").status_code == 204
    assert client.get(f"/api/problems/{pid}").status_code == 404
    assert client.delete(f"/api/problems/{pid}").status_code == 404

    assert session.exec(select(TestCase).where(TestCase.problem_id == pid)).all() == []
    assert session.exec(select(Submission).where(Submission.problem_id == pid)).all() == []
