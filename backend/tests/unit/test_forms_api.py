from __future__ import annotations

import re


def test_list_forms(store_client):
    response = store_client.get("/api/v1/forms")

    assert response.status_code == 200
    forms = response.json()
    assert forms[0]["formId"] == "FORM-AB12CD34"
    assert forms[0]["questions"][1] == {"questionId": "Q2", "question": "Rate collaboration", "type": "rating"}
    assert "createdAt" in forms[0]


def test_list_forms_empty_is_not_found(store_client, containers):
    containers.forms.docs.clear()

    response = store_client.get("/api/v1/forms")

    assert response.status_code == 404
    assert response.json() == {"message": "No forms found"}


def test_list_forms_newest_first(store_client):
    created = store_client.post("/api/v1/forms", json={"questions": [{"question": "Goals?", "type": "text"}]})

    response = store_client.get("/api/v1/forms", params={"order": "desc"})

    assert [f["formId"] for f in response.json()] == [created.json()["formId"], "FORM-AB12CD34"]


def test_list_forms_filter_by_id(store_client):
    response = store_client.get("/api/v1/forms", params={"form_id": "ab12"})

    assert [f["formId"] for f in response.json()] == ["FORM-AB12CD34"]


def test_create_form(store_client, containers):
    response = store_client.post(
        "/api/v1/forms",
        json={
            "questions": [
                {"question": "What did you deliver?", "type": "text"},
                {"question": "Rate teamwork", "type": "rating"},
            ]
        },
    )

    assert response.status_code == 201
    form = response.json()
    assert re.fullmatch(r"FORM-[0-9A-Z]{8}", form["formId"])
    assert [q["questionId"] for q in form["questions"]] == ["Q1", "Q2"]
    assert form["formId"] in containers.forms.docs


def test_create_form_without_questions_is_400(store_client):
    assert store_client.post("/api/v1/forms", json={}).status_code == 400
    assert store_client.post("/api/v1/forms", json={"questions": []}).status_code == 400


def test_create_form_rejects_unknown_question_type(store_client):
    response = store_client.post("/api/v1/forms", json={"questions": [{"question": "Q?", "type": "essay"}]})

    assert response.status_code == 400


def test_get_form(store_client):
    assert store_client.get("/api/v1/forms/FORM-AB12CD34").status_code == 200
    assert store_client.get("/api/v1/forms/FORM-NOPE0000").status_code == 404


def test_delete_form(store_client):
    response = store_client.delete("/api/v1/forms/FORM-AB12CD34")

    assert response.status_code == 200
    assert store_client.get("/api/v1/forms/FORM-AB12CD34").status_code == 404
    assert store_client.delete("/api/v1/forms/FORM-AB12CD34").status_code == 404


def test_bulk_delete_forms(store_client, containers):
    response = store_client.request("DELETE", "/api/v1/forms", json={"formIds": ["FORM-AB12CD34", "FORM-X"]})

    assert response.status_code == 200
    assert response.json()["deletedCount"] == 1
    assert containers.forms.docs == {}


def test_bulk_delete_forms_requires_list(store_client):
    assert store_client.request("DELETE", "/api/v1/forms", json={"formIds": 7}).status_code == 400
