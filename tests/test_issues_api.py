from datetime import datetime, timezone

from sqlalchemy.exc import OperationalError
from sqlmodel import select

from issuedesk.models.issue import Issue, Subtask

API = "/api/v1"


def month_prefix(project_code="PRJ"):
    return f"{project_code}-{datetime.now(timezone.utc):%m%Y}-"


def create_issue(client, headers, project_id, **payload):
    payload.setdefault("title", "Something broke")
    response = client.post(f"{API}/projects/{project_id}/issues", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_requires_authentication(client, project):
    response = client.post(f"{API}/projects/{project.id}/issues", json={"title": "x"})
    assert response.status_code == 401


def test_sequential_issue_codes(client, staff_headers, project):
    first = create_issue(client, staff_headers, project.id)
    second = create_issue(client, staff_headers, project.id)

    assert first["issue_code"] == month_prefix() + "001"
    assert second["issue_code"] == month_prefix() + "002"
    assert first["on_late_time"] == ""


def test_client_supplied_issue_code_is_ignored(client, staff_headers, project):
    issue = create_issue(client, staff_headers, project.id, issue_code="PRJ-HACK-999")
    assert issue["issue_code"] == month_prefix() + "001"


def test_preview_matches_next_allocation(client, staff_headers, project):
    create_issue(client, staff_headers, project.id)
    preview = client.get(f"{API}/projects/{project.id}/issue-codes/next", headers=staff_headers)

    assert preview.status_code == 200
    assert preview.json() == {"issue_code": month_prefix() + "002"}


def test_deleted_gap_is_not_reused(client, staff_headers, project):
    issues = [create_issue(client, staff_headers, project.id) for _ in range(3)]

    response = client.delete(f"{API}/issues/{issues[1]['id']}", headers=staff_headers)
    assert response.status_code == 200

    fourth = create_issue(client, staff_headers, project.id)
    assert fourth["issue_code"] == month_prefix() + "004"


def test_lateness_is_computed_on_create(client, staff_headers, project):
    issue = create_issue(
        client, staff_headers, project.id,
        due_date="2025-03-10T09:00:00",
        complete_date="2025-03-15T09:00:00",
    )
    assert issue["on_late_time"] == "Late Time (5 Day)"


def test_updating_complete_date_rewrites_lateness(client, staff_headers, project):
    issue = create_issue(
        client, staff_headers, project.id,
        due_date="2025-03-10T09:00:00",
        complete_date="2025-03-15T09:00:00",
    )

    response = client.patch(
        f"{API}/issues/{issue['id']}",
        json={"complete_date": "2025-03-08T09:00:00"},
        headers=staff_headers,
    )
    assert response.status_code == 200
    assert response.json()["on_late_time"] == "On Time (2 Day)"

    response = client.patch(f"{API}/issues/{issue['id']}", json={"due_date": None}, headers=staff_headers)
    assert response.json()["on_late_time"] == ""


def test_utc_suffixed_dates_keep_lateness_current(client, staff_headers, project):
    issue = create_issue(
        client, staff_headers, project.id,
        due_date="2024-01-10T00:00:00Z",
        complete_date="2024-01-12T00:00:00Z",
    )
    assert issue["on_late_time"] == "Late Time (2 Day)"

    response = client.patch(
        f"{API}/issues/{issue['id']}",
        json={"complete_date": "2024-01-15T00:00:00Z"},
        headers=staff_headers,
    )
    assert response.status_code == 200
    assert response.json()["on_late_time"] == "Late Time (5 Day)"


def test_mixed_aware_and_naive_dates_are_classified(client, staff_headers, project):
    issue = create_issue(
        client, staff_headers, project.id,
        due_date="2024-01-10T00:00:00Z",
        complete_date="2024-01-12T00:00:00",
    )
    assert issue["on_late_time"] == "Late Time (2 Day)"

    response = client.patch(
        f"{API}/issues/{issue['id']}",
        json={"due_date": "2024-01-13T00:00:00+07:00"},
        headers=staff_headers,
    )
    assert response.json()["on_late_time"] == "On Time (0 Day)"


def test_null_title_is_rejected(client, staff_headers, project):
    issue = create_issue(client, staff_headers, project.id)
    response = client.patch(f"{API}/issues/{issue['id']}", json={"title": None}, headers=staff_headers)

    assert response.status_code == 422
    assert client.get(f"{API}/issues/{issue['id']}", headers=staff_headers).json()["title"] == "Something broke"


def test_null_subtask_details_are_rejected(client, staff_headers, project):
    issue = create_issue(client, staff_headers, project.id, subtasks=[{"details": "Keep me"}])
    subtask_id = issue["subtasks"][0]["id"]

    response = client.patch(
        f"{API}/issues/{issue['id']}/subtasks/{subtask_id}",
        json={"details": None},
        headers=staff_headers,
    )
    assert response.status_code == 422


def test_on_late_time_cannot_be_written_directly(
client, staff_headers, project):
    issue = create_issue(client, staff_headers, project.id)
    response = client.patch(
        f"{API}/issues/{issue['id']}",
        json={"on_late_time": "On Time (9 Day)", "title": "Renamed"},
        headers=staff_headers,
    )
    assert response.json()["on_late_time"] == ""
    assert response.json()["title"] == "Renamed"


def test_subtasks_are_created_inline_and_deleted_with_issue(client, db, staff_headers, project):
    issue = create_issue(
        client, staff_headers, project.id,
        subtasks=[{"details": "Reproduce"}, {"details": "Fix"}],
    )
    assert [s["details"] for s in issue["subtasks"]] == ["Reproduce", "Fix"]

    client.delete(f"{API}/issues/{issue['id']}", headers=staff_headers)
    assert db.exec(select(Subtask)).all() == []


def test_subtask_crud(client, staff_headers, project):
    issue = create_issue(client, staff_headers, project.id)
    base = f"{API}/issues/{issue['id']}/subtasks"

    created = client.post(base, json={"details": "Write test"}, headers=staff_headers)
    assert created.status_code == 201
    subtask_id = created.json()["id"]

    updated = client.patch(f"{base}/{subtask_id}", json={"status": "Done"}, headers=staff_headers)
    assert updated.json()["status"] == "Done"
    assert updated.json()["details"] == "Write test"

    assert client.delete(f"{base}/{subtask_id}", headers=staff_headers).status_code == 200
    assert client.get(base, headers=staff_headers).json() == []


def test_subtask_of_another_issue_is_not_found(client, staff_headers, project):
    first = create_issue(client, staff_headers, project.id)
    second = create_issue(client, staff_headers, project.id)
    subtask = client.post(
        f"{API}/issues/{first['id']}/subtasks", json={"details": "x"}, headers=staff_headers,
    ).json()

    response = client.patch(
        f"{API}/issues/{second['id']}/subtasks/{subtask['id']}", json={"status": "Done"}, headers=staff_headers,
    )
    assert response.status_code == 404


def test_duplicate_gets_new_code_and_copies_subtasks(client, staff_headers, project):
    source = create_issue(
        client, staff_headers, project.id,
        title="Original", developer="Dana",
        subtasks=[{"details": "Step 1"}],
    )
    response = client.post(f"{API}/issues/{source['id']}/duplicate", json={}, headers=staff_headers)

    assert response.status_code == 201
    copy = response.json()
    assert copy["issue_code"] == month_prefix() + "002"
    assert copy["title"] == "Original"
    assert copy["developer"] == "Dana"
    assert [s["details"] for s in copy["subtasks"]] == ["Step 1"]
    assert copy["subtasks"][0]["id"] != source["subtasks"][0]["id"]


def test_list_filters_by_keyword(client, staff_headers, project):
    create_issue(client, staff_headers, project.id, title="Login fails")
    create_issue(client, staff_headers, project.id, title="Report slow")

    response = client.get(f"{API}/projects/{project.id}/issues", params={"keyword": "login"}, headers=staff_headers)
    assert [i["title"] for i in response.json()] == ["Login fails"]


def test_list_filters_by_status_alias(client, staff_headers, project):
    create_issue(client, staff_headers, project.id, title="Open one")
    create_issue(client, staff_headers, project.id, title="Done one", status="Complete")

    response = client.get(f"{API}/projects/{project.id}/issues", params={"status": "Complete"}, headers=staff_headers)
    assert [i["title"] for i in response.json()] == ["Done one"]


def test_unreadable_store_is_503_not_first_run(client, db, staff_headers, project, monkeypatch):
    real_exec = db.exec

    def failing_exec(statement, *args, **kwargs):
        if "FROM issues" in str(statement):
            raise OperationalError(str(statement), {}, Exception("database is locked"))
        return real_exec(statement, *args, **kwargs)

    monkeypatch.setattr(db, "exec", failing_exec)

    response = client.post(f"{API}/projects/{project.id}/issues", json={"title": "x"}, headers=staff_headers)

    assert response.status_code == 503
    assert response.json()["detail"]["code"] == "ISSUE_STORE_UNAVAILABLE"
    monkeypatch.undo()
    assert db.exec(select(Issue)).all() == []


def test_unknown_project_is_404(client, staff_headers):
    response = client.post(f"{API}/projects/999/issues", json={"title": "x"}, headers=staff_headers)
    assert response.status_code == 404


def test_dashboard_lists_issues_with_project_name(client, staff_headers, project):
    create_issue(client, staff_headers, project.id, due_date="2025-03-10T09:00:00",
                 complete_date="2025-03-12T09:00:00")
    create_issue(client, staff_headers, project.id, due_date="2025-03-10T09:00:00",
                 complete_date="2025-03-09T09:00:00", status="Complete")
    create_issue(client, staff_headers, project.id)

    issues = client.get(f"{API}/dashboard/issues", headers=staff_headers).json()
    assert {i["project_name"] for i in issues} == {"Portal"}

    summary = client.get(f"{API}/dashboard/summary", headers=staff_headers).json()
    assert summary["total"] == 3
    assert summary["by_status"]["Complete"] == 1
    assert summary["by_status"]["Awaiting"] == 2
    assert summary["late"] == 1
    assert summary["on_time"] == 1
