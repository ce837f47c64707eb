from __future__ import annotations

import io

import pytest
from openpyxl import load_workbook

from app.dependencies.auth import get_current_user
from app.helpers.field_mapping import SHEET_COLUMNS
from app.schemas.auth import CurrentUser
from tests.factories import employee_row, make_workbook

XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _upload(client, path: str, data: bytes, filename: str = "employees.xlsx"):
    return client.post(path, files={"file": (filename, data, XLSX)})


def _create(client, empcode: str, **fields):
    body = {"empcode": empcode, "firstName": "Jane", "lastName": "Doe"}
    body.update(fields)
    response = client.post("/api/employees", json=body)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_create_returns_camel_case_record(client):
    data = _create(client, "E1", middleName="", empStatus="Active", projName="Tower A")

    assert data["empcode"] == "E1"
    assert data["fullName"] == "Jane Doe"
    assert data["projName"] == "Tower A"
    assert data["middleName"] is None
    assert data["status"] == "active"
    assert data["role"] == "employee"
    assert "createdAt" in data and "updatedAt" in data


def test_create_accepts_snake_case(client):
    response = client.post("/api/employees", json={"empcode": "E1", "first_name": "Ann", "emp_status": "Resigned"})

    assert response.status_code == 201
    assert response.json()["data"]["status"] == "inactive"


def test_create_duplicate_returns_409(client):
    _create(client, "E1")

    response = client.post("/api/employees", json={"empcode": "E1"})

    assert response.status_code == 409
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "DUPLICATE_KEY"


def test_create_rejects_unknown_field(client):
    response = client.post("/api/employees", json={"empcode": "E1", "salary": 100})

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_get_employee(client):
    _create(client, "E1", position="Engineer")

    response = client.get("/api/employees/E1")

    assert response.status_code == 200
    assert response.json() == {"success": True, "data": response.json()["data"]}
    assert response.json()["data"]["position"] == "Engineer"


def test_get_missing_employee_returns_404(client):
    response = client.get("/api/employees/NOPE")

    assert response.status_code == 404
    assert response.json()["error"] == {"code": "NOT_FOUND", "message": "Employee not found"}


def test_list_with_filters_search_and_sort(client):
    _create(client, "E1", firstName="Ann", lastName="Lee", position="Site Engineer", projName="Tower A")
    _create(client, "E2", firstName="Ben", lastName="Ong", position="Accountant", projName="Tower A")
    _create(client, "E3", firstName="Cara", lastName="Diaz", position="Engineer", projName="Tower B")

    everyone = client.get("/api/employees").json()["data"]
    engineers = client.get("/api/employees", params={"search": "engineer", "sortBy": "fullName", "sortOrder": "desc"}).json()["data"]
    tower_a = client.get("/api/employees", params={"projName": "Tower A"}).json()["data"]

    assert [e["empcode"] for e in everyone] == ["E1", "E2", "E3"]
    assert set(everyone[0]) == {"empcode", "fullName", "position", "projName", "rank", "empStatus", "cbeNoncbe", "status"}
    assert [e["empcode"] for e in engineers] == ["E3", "E1"]
    assert [e["empcode"] for e in tower_a] == ["E1", "E2"]


@pytest.mark.parametrize(
    "params",
    [
        {"department": "IT"},
        {"sortBy": "salary"},
        {"sortBy": "fullName", "sortOrder": "sideways"},
        {"status": "retired"},
    ],
)
def test_list_rejects_bad_query(client, params):
    response = client.get("/api/employees", params=params)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_FILTER"


def test_update_employee(client):
    _create(client, "E1", remarks="pending", costcode="C1")

    response = client.put("/api/employees/E1", json={"lastName": "Smith", "remarks": "", "position": "Lead"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["lastName"] == "Smith"
    assert data["fullName"] == "Jane Smith"
    assert data["remarks"] is None
    assert data["costcode"] == "C1"
    assert data["position"] == "Lead"


def test_update_cannot_change_code(client):
    _create(client, "E1")

    response = client.put("/api/employees/E1", json={"empcode": "E2"})

    assert response.status_code == 422


def test_update_missing_employee_returns_404(client):
    response = client.put("/api/employees/NOPE", json={"position": "Lead"})

    assert response.status_code == 404


def test_delete_employee(client):
    _create(client, "E1")

    assert client.delete("/api/employees/E1").json() == {"success": True}
    assert client.delete("/api/employees/E1").status_code == 404


def test_import_replaces_everything(client):
    _create(client, "OLD")
    data = make_workbook([
        employee_row("A", "Alice", "Reyes"),
        employee_row("B", "Bob", "Santos"),
        employee_row("A", "Andrea", "Other"),
    ])

    response = _upload(client, "/api/employees/import", data)

    assert response.status_code == 200, response.text
    result = response.json()["data"]
    assert result == {
        "success": True,
        "totalRows": 3,
        "importedRows": 2,
        "skippedRows": 1,
        "previousCount": 1,
        "duplicates": [{"empcode": "A", "fullName": "Andrea Other"}],
    }
    codes = [e["empcode"] for e in client.get("/api/employees").json()["data"]]
    assert codes == ["A", "B"]
    assert client.get("/api/employees/A").json()["data"]["firstName"] == "Alice"


def test_import_validation_failure_changes_nothing(client):
    _create(client, "KEEP")
    data = make_workbook([employee_row("A"), {"FIRST NAME": "No Code"}, employee_row("C", NO="x")])

    response = _upload(client, "/api/employees/import", data)

    assert response.status_code == 422
    error = response.json()["error"]
    assert error["code"] == "ROW_VALIDATION_FAILED"
    details = error["details"]
    assert details["success"] is False
    assert details["totalRows"] == 3
    assert [(e["row"], e["column"]) for e in details["errors"]] == [(3, "EMPCODE"), (4, "NO")]
    codes = [e["empcode"] for e in client.get("/api/employees").json()["data"]]
    assert codes == ["KEEP"]


def test_update_upload_preserves_absent_records(client):
    _create(client, "A", position="Clerk")
    _create(client, "B", position="Clerk")
    before_a = client.get("/api/employees/A").json()["data"]
    data = make_workbook([
        employee_row("B", POSITION="Supervisor"),
        employee_row("C", "Carl", "Uy"),
    ])

    response = _upload(client, "/api/employees/update", data)

    assert response.status_code == 200, response.text
    result = response.json()["data"]
    assert result["updated"] == ["B"]
    assert result["inserted"] == ["C"]
    assert result["updatedRows"] == 1
    assert result["insertedRows"] == 1
    assert result["skippedRows"] == 0
    assert client.get("/api/employees/A").json()["data"] == before_a
    assert client.get("/api/employees/B").json()["data"]["position"] == "Supervisor"


def test_upload_without_file(client):
    response = client.post("/api/employees/import")

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "NO_FILE"


def test_upload_with_wrong_extension(client):
    response = _upload(client, "/api/employees/update", b"EMPCODE\nE1\n", filename="employees.csv")

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_FILE"


def test_upload_of_corrupt_workbook_hides_details(client):
    response = _upload(client, "/api/employees/import", b"not really a workbook")

    assert response.status_code == 500
    error = response.json()["error"]
    assert error["code"] == "CODEC_ERROR"
    assert error["message"] == "The spreadsheet could not be processed"


def test_export(client):
    _create(client, "E1", position="Engineer")
    _create(client, "E2")

    response = client.get("/api/employees/export")

    assert response.status_code == 200
    assert response.headers["content-type"] == XLSX
    assert response.headers["content-disposition"] == "attachment; filename=employees.xlsx"
    rows = list(load_workbook(io.BytesIO(response.content)).active.iter_rows(values_only=True))
    assert list(rows[0]) == list(SHEET_COLUMNS)
    assert [row[1] for row in rows[1:]] == ["E1", "E2"]


def test_read_only_role(app, client):
    app.dependency_overrides[get_current_user] = lambda: CurrentUser(id="2", role="employee")

    assert client.get("/api/employees").status_code == 200

    response = client.post("/api/employees", json={"empcode": "E1"})
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "FORBIDDEN"
    assert _upload(client, "/api/employees/import", make_workbook([employee_row("A")])).status_code == 403
    assert client.get("/api/employees/export").status_code == 403
    assert client.delete("/api/employees/E1").status_code == 403


def test_missing_user_is_unauthorized(app, client):
    app.dependency_overrides[get_current_user] = lambda: None

    response = client.get("/api/employees")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"


def test_clearing_name_parts_matches_create(client):
    _create(client, "E1")

    first_cleared = client.put("/api/employees/E1", json={"firstName": ""}).json()["data"]
    both_cleared = client.put("/api/employees/E1", json={"lastName": ""}).json()["data"]
    created = client.post("/api/employees", json={"empcode": "E2", "lastName": "Doe"}).json()["data"]

    assert first_cleared["fullName"] == "Doe"
    assert both_cleared["fullName"] == "Unknown"
    assert created["fullName"] == "Doe"


@pytest.mark.parametrize("empcode", ['  "" ', "   ", '"'])
def test_create_rejects_blank_code(client, empcode):
    response = client.post("/api/employees", json={"empcode": empcode, "firstName": "Jane"})

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"
    assert client.get("/api/employees/UNKNOWN").status_code == 404
