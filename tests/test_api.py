# /tests/test_api.py

API = "/api/v1"


def test_health_check(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "running" in response.json()["status"]


# --- Envelopes & Errors ---

def test_missing_token_is_unauthorized(client):
    response = client.get(f"{API}/blocks")
    body = response.json()
    assert response.status_code == 401
    assert body["success"] is False
    assert body["error"]["code"] == "AUTH-004"
    assert response.headers["WWW-Authenticate"] == "Bearer"
    assert response.headers["X-Request-Id"]


def test_garbage_token_is_unauthorized(client):
    response = client.get(f"{API}/blocks", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "AUTH-003"


def test_missing_permission_is_forbidden(client, teacher, auth_headers):
    response = client.get(f"{API}/blocks", headers=auth_headers(teacher))
    assert response.status_code == 403
    assert response.json()["message"] == "Insufficient permissions"


def test_unknown_route_uses_error_envelope(client):
    response = client.get(f"{API}/nothing-here")
    assert response.status_code == 404
    assert response.json()["message"] == f"Route not found: GET {API}/nothing-here"


def test_invalid_body_is_a_validation_failure(client, super_admin, auth_headers):
    response = client.post(f"{API}/blocks", json={"name": ""}, headers=auth_headers(super_admin))
    body = response.json()
    assert response.status_code == 400
    assert body["message"] == "Validation failed"
    fields = {e["field"] for e in body["error"]["additionalInfo"]["errors"]}
    assert {"name", "school_id", "number_of_classrooms"} <= fields


def test_inbound_request_id_is_echoed(client, super_admin, auth_headers):
    headers = {**auth_headers(super_admin), "X-Request-Id": "trace-123"}
    response = client.get(f"{API}/schools", headers=headers)
    assert response.headers["X-Request-Id"] == "trace-123"
    assert response.json()["meta"]["requestId"] == "trace-123"


# --- Auth ---

def test_register_login_and_me(client, school):
    payload = {
        "username": "newbie",
        "email": "newbie@example.com",
        "first_name": "New",
        "last_name": "Person",
        "password": "s3cret-pass",
        "school_id": str(school.id),
    }
    registered = client.post(f"{API}/auth/register", json=payload)
    assert registered.status_code == 201
    assert registered.json()["data"]["role"] == "user"
    assert "hashed_password" not in registered.json()["data"]

    login = client.post(f"{API}/auth/login", json={"username": "newbie@example.com", "password": "s3cret-pass"})
    assert login.status_code == 200
    token = login.json()["data"]["access_token"]

    me = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["data"]["username"] == "newbie"


def test_duplicate_username_conflicts(client, teacher):
    payload = {"username": "teacher", "first_name": "T", "last_name": "T", "password": "password123"}
    response = client.post(f"{API}/auth/register", json=payload)
    assert response.status_code == 409


def test_wrong_password_is_unauthorized(client, teacher):
    response = client.post(f"{API}/auth/login", json={"username": "teacher", "password": "wrong-password"})
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "AUTH-001"


def test_oauth2_token_endpoint_returns_bare_token(client, teacher):
    response = client.post(f"{API}/auth/token", data={"username": "teacher", "password": "password123"})
    assert response.status_code == 200
    assert response.json()["token_type"] == "bearer"


# --- School Scoping ---

def test_admin_only_sees_own_school(client, db, school, other_school, user_factory, auth_headers):
    db.blocks.create({"school_id": school.id, "name": "Mine", "number_of_classrooms": 2})
    foreign = db.blocks.create({"school_id": other_school.id, "name": "Theirs", "number_of_classrooms": 2})
    admin = user_factory("principal", role="admin", school=school)

    listed = client.get(f"{API}/blocks", headers=auth_headers(admin)).json()
    assert [b["name"] for b in listed["data"]] == ["Mine"]

    response = client.get(f"{API}/blocks/{foreign.id}", headers=auth_headers(admin))
    assert response.status_code == 403


def test_admin_without_school_is_refused(client, user_factory, auth_headers):
    admin = user_factory("floating", role="admin")
    response = client.get(f"{API}/blocks", headers=auth_headers(admin))
    assert response.status_code == 403
    assert response.json()["message"] == "Access denied: No school context found for this user"


def test_list_carries_pagination_meta(client, db, school, super_admin, auth_headers):
    for n in range(3):
        db.blocks.create({"school_id": school.id, "name": f"Block {n}", "number_of_classrooms": 1})
    body = client.get(f"{API}/blocks?limit=2&page=1", headers=auth_headers(super_admin)).json()
    assert len(body["data"]) == 2
    assert body["meta"]["pagination"] == {
        "page": 1, "limit": 2, "totalItems": 3, "totalPages": 2, "hasNextPage": True, "hasPrevPage": False,
    }


# --- Feature Endpoints ---

def test_grade_endpoints(client, project, student, super_admin, auth_headers):
    headers = auth_headers(super_admin)
    created = client.post(
        f"{API}/project-grades",
        json={"project_id": str(project.id), "student_id": str(student.id), "score": 88},
        headers=headers,
    )
    assert created.status_code == 201
    assert created.json()["data"]["grader_id"] == str(super_admin.id)

    listed = client.get(f"{API}/project-grades/list?project_id={project.id}", headers=headers)
    assert listed.json()["meta"]["pagination"]["totalItems"] == 1

    by_project = client.get(f"{API}/project-grades/{project.id}", headers=headers)
    assert [g["score"] for g in by_project.json()["data"]] == [88.0]

    unfiltered = client.get(f"{API}/project-grades/list", headers=headers)
    assert unfiltered.status_code == 400

    duplicate = client.post(
        f"{API}/project-grades",
        json={"project_id": str(project.id), "student_id": str(student.id), "score": 70},
        headers=headers,
    )
    assert duplicate.status_code == 409


def test_default_department_may_be_empty(client, school, super_admin, auth_headers):
    response = client.get(f"{API}/departments/school/{school.id}/default", headers=auth_headers(super_admin))
    assert response.status_code == 200
    assert response.json()["data"] is None
    assert response.json()["message"] == "No default department set"


def test_student_enrollment_endpoint(client, school, super_admin, user_factory, auth_headers):
    pupil = user_factory("kid", role="student", school=school)
    response = client.post(
        f"{API}/students",
        json={"user_id": str(pupil.id), "school_id": str(school.id), "enrollment_date": "2024-09-01", "grade_level": "Grade 3"},
        headers=auth_headers(super_admin),
    )
    assert response.status_code == 201
    number = response.json()["data"]["student_number"]
    assert number.startswith("GF-G3-")

    fetched = client.get(f"{API}/students/number/{number}", headers=auth_headers(super_admin))
    assert fetched.json()["data"]["user_id"] == str(pupil.id)


def test_null_for_required_update_field_is_a_validation_failure(client, project, student, super_admin, auth_headers):
    headers = auth_headers(super_admin)
    created = client.post(
        f"{API}/project-grades",
        json={"project_id": str(project.id), "student_id": str(student.id), "score": 5, "max_score": 10},
        headers=headers,
    ).json()["data"]

    response = client.put(f"{API}/project-grades/{created['id']}", json={"score": 6, "max_score": None}, headers=headers)

    assert response.status_code == 400
    assert [e["field"] for e in response.json()["error"]["additionalInfo"]["errors"]] == ["max_score"]
