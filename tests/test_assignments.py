from sqlalchemy.orm import Query, Session

from config import DEFAULT_ASSIGNMENT_POINTS, DEFAULT_ASSIGNMENT_TYPE
from models.assignment import AssignmentModel


def assignments_url(class_id: str) -> str:
    return f"/api/classgo/classes/{class_id}/assignments"


def test_non_member_cannot_list(client, classroom, other_student):
    resp = client.get(assignments_url(classroom["id"]), headers=other_student)
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Not a member of this class"


def test_member_lists_empty_class(client, classroom, teacher, student):
    for headers, role in ((teacher, "teacher"), (student, "student")):
        resp = client.get(assignments_url(classroom["id"]), headers=headers)
        assert resp.status_code == 200
        assert resp.json() == {"assignments": [], "userRole": role}


def test_list_requires_auth(client, classroom):
    assert client.get(assignments_url(classroom["id"])).status_code == 401


def test_create_assignment_defaults(client, classroom, teacher):
    resp = client.post(
        assignments_url(classroom["id"]),
        json={"title": "Lab report", "instructions": "Use the template."},
        headers=teacher,
    )
    assert resp.status_code == 201
    data = resp.json()["assignment"]
    assert data["title"] == "Lab report"
    assert data["points"] == 100
    assert data["assignment_type"] == "assignment"
    assert data["due_date"] is None
    assert data["class_id"] == classroom["id"]


def test_create_assignment_with_fields(client, classroom, teacher):
    resp = client.post(
        assignments_url(classroom["id"]),
        json={
            "title": "Unit quiz",
            "dueDate": "2026-11-01T09:00:00+00:00",
            "points": 20,
            "assignmentType": "quiz",
        },
        headers=teacher,
    )
    assert resp.status_code == 201
    data = resp.json()["assignment"]
    assert data["points"] == 20
    assert data["assignment_type"] == "quiz"
    assert data["due_date"].startswith("2026-11-01T09:00:00")


def test_create_assignment_requires_title(client, classroom, teacher):
    resp = client.post(assignments_url(classroom["id"]), json={"title": ""}, headers=teacher)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Title is required"


def test_create_assignment_rejects_bad_type(client, classroom, teacher):
    resp = client.post(
        assignments_url(classroom["id"]),
        json={"title": "X", "assignmentType": "exam"},
        headers=teacher,
    )
    assert resp.status_code == 400


def test_student_cannot_create_assignment(client, classroom, student):
    resp = client.post(assignments_url(classroom["id"]), json={"title": "Hack"}, headers=student)
    assert resp.status_code == 403


def test_non_member_cannot_create_assignment(client, classroom, other_student):
    resp = client.post(
        assignments_url(classroom["id"]), json={"title": "Hack"}, headers=other_student
    )
    assert resp.status_code == 403


def test_assignments_newest_first(client, classroom, teacher, db_session):
    for index, created_at in enumerate(
        ["2026-01-01T00:00:00.000000+00:00", "2026-03-01T00:00:00.000000+00:00",
         "2026-02-01T00:00:00.000000+00:00"]
    ):
        db_session.add(
            AssignmentModel(
                id=f"a-{index}",
                class_id=classroom["id"],
                teacher_id=classroom["teacher_id"],
                title=f"A{index}",
                points=100,
                assignment_type="assignment",
                created_at=created_at,
            )
        )
    db_session.commit()

    resp = client.get(assignments_url(classroom["id"]), headers=teacher)
    assert [a["id"] for a in resp.json()["assignments"]] == ["a-1", "a-2", "a-0"]


def test_teacher_listing_has_no_submissions(client, classroom, assignment, teacher, student):
    client.post(
        f"/api/classgo/assignments/{assignment['id']}/submit",
        json={"content": "My essay"},
        headers=student,
    )
    resp = client.get(assignments_url(classroom["id"]), headers=teacher)
    assert resp.status_code == 200
    assert resp.json()["assignments"][0]["submission"] is None


def test_student_sees_only_own_submission(
    client, classroom, assignment, student, other_student
):
    client.post(
        "/api/classgo/classes/join",
        json={"classCode": classroom["class_code"]},
        headers=other_student,
    )
    client.post(
        f"/api/classgo/assignments/{assignment['id']}/submit",
        json={"content": "first student's work"},
        headers=student,
    )

    own = client.get(assignments_url(classroom["id"]), headers=student).json()
    submission = own["assignments"][0]["submission"]
    assert submission["content"] == "first student's work"
    assert submission["status"] == "submitted"

    other = client.get(assignments_url(classroom["id"]), headers=other_student).json()
    assert other["userRole"] == "student"
    assert other["assignments"][0]["submission"] is None


def test_create_assignment_rejects_negative_points(client, classroom, teacher, db_session):
    resp = client.post(
        assignments_url(classroom["id"]),
        json={"title": "Essay", "points": -5},
        headers=teacher,
    )
    assert resp.status_code == 400
    assert db_session.query(AssignmentModel).count() == 0


def test_create_assignment_keeps_zero_points(client, classroom, teacher):
    resp = client.post(
        assignments_url(classroom["id"]),
        json={"title": "Reading", "points": 0},
        headers=teacher,
    )
    assert resp.status_code == 201
    assert resp.json()["assignment"]["points"] == 0


def test_create_assignment_rejects_unparseable_due_date(client, classroom, teacher, db_session):
    resp = client.post(
        assignments_url(classroom["id"]),
        json={"title": "Essay", "dueDate": "next friday"},
        headers=teacher,
    )
    assert resp.status_code == 400
    assert db_session.query(AssignmentModel).count() == 0


def test_create_assignment_store_failure(client, classroom, teacher, break_store):
    break_store(Session, "commit", 1)
    resp = client.post(assignments_url(classroom["id"]), json={"title": "Essay"}, headers=teacher)
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Failed to create assignment"


def test_list_assignments_store_failure(client, classroom, teacher, break_store):
    break_store(Query, "all", 1)
    resp = client.get(assignments_url(classroom["id"]), headers=teacher)
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Failed to fetch assignments"


def test_student_submission_lookup_store_failure(client, classroom, assignment, student, break_store):
    # First read returns the assignments, the second (student's submissions) fails
    break_store(Query, "all", 2)
    resp = client.get(assignments_url(classroom["id"]), headers=student)
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Failed to fetch assignments"


def test_assignment_column_defaults(db_session):
    db_session.add(
        AssignmentModel(
            id="a-1",
            class_id="c-1",
            teacher_id="t-1",
            title="Worksheet",
            created_at="2026-01-01T00:00:00.000000+00:00",
        )
    )
    db_session.commit()

    stored = db_session.get(AssignmentModel, "a-1")
    assert stored.points == DEFAULT_ASSIGNMENT_POINTS
    assert stored.assignment_type == DEFAULT_ASSIGNMENT_TYPE
