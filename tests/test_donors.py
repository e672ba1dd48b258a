from conftest import headers_for, make_employee, make_user


def test_donor_crud(client, admin_headers, project):
    user = make_user("Voluntario")
    base = f"/api/v1/donors/{user.id}/{project.id}"

    r = client.post(
        "/api/v1/donors",
        headers=admin_headers,
        json={"userId": str(user.id), "projectId": str(project.id), "frequency": "Mensal",
              "nextDonationDate": "2030-02-01"},
    )
    assert r.status_code == 201, r.text
    body = r.get_json()
    assert body["frequency"] == "mensal"
    assert body["nextDonationDate"] == "2030-02-01"
    assert "Doador" in user.roles

    r = client.post(
        "/api/v1/donors", headers=admin_headers, json={"userId": str(user.id), "projectId": str(project.id)}
    )
    assert r.status_code == 409

    r = client.patch(base, headers=admin_headers, json={"frequency": "pontual", "note": "prefere pix"})
    assert r.status_code == 200
    assert r.get_json()["frequency"] == "pontual"
    assert r.get_json()["nextDonationDate"] == "2030-02-01"

    r = client.get(f"/api/v1/donors?userId={user.id}", headers=admin_headers)
    assert len(r.get_json()) == 1

    r = client.delete(base, headers=admin_headers)
    assert r.status_code == 204


def test_donor_frequency_is_strict(client, admin_headers, project):
    user = make_user("Doador")
    r = client.post(
        "/api/v1/donors",
        headers=admin_headers,
        json={"userId": str(user.id), "projectId": str(project.id), "frequency": "semanal"},
    )
    assert r.status_code == 400


def test_donor_management_is_admin_tier(client, project):
    employee = make_user("Funcionario")
    make_employee(employee, project, privileged=True)
    user = make_user("Doador")
    r = client.post(
        "/api/v1/donors",
        headers=headers_for(employee),
        json={"userId": str(user.id), "projectId": str(project.id)},
    )
    assert r.status_code == 403
