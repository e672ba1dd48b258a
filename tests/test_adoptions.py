import uuid
from datetime import date

import pytest

from pawhub_api.extensions import db
from pawhub_api.models import Adoption, AdoptionUpdate

from conftest import headers_for, make_employee, make_project, make_user


def _new_animal(client, headers, project, name="Caramelo"):
    r = client.post(
        "/api/v1/animals", headers=headers, json={"projectId": str(project.id), "name": name, "species": "cachorro"}
    )
    assert r.status_code == 201, r.text
    return r.get_json()["id"]


@pytest.fixture
def adopter(app):
    return make_user("Adotante")


@pytest.fixture
def adoption(client, admin_headers, project, adopter):
    animal_id = _new_animal(client, admin_headers, project)
    adoption = Adoption(id_projeto=project.id, id_adotante=adopter.id, id_animal=uuid.UUID(animal_id))
    db.session.add(adoption)
    db.session.commit()
    return adoption


def test_create_adoption(client, admin_headers, project):
    adopter = make_user("Adotante")
    animal_id = _new_animal(client, admin_headers, project)
    r = client.post(
        "/api/v1/adoptions",
        headers=admin_headers,
        json={"projectId": str(project.id), "adopterId": str(adopter.id), "animalId": animal_id},
    )
    assert r.status_code == 201, r.text
    body = r.get_json()
    assert body["adoptionDate"] == date.today().isoformat()
    assert body["lastUpdate"] is None


def test_create_adoption_validates_adopter_and_animal(client, admin_headers, project):
    not_adopter = make_user("Voluntario")
    animal_id = _new_animal(client, admin_headers, make_project())
    adopter = make_user("Adotante")

    r = client.post(
        "/api/v1/adoptions",
        headers=admin_headers,
        json={"projectId": str(project.id), "adopterId": str(not_adopter.id), "animalId": animal_id},
    )
    assert r.status_code == 400

    # animal de outro projeto
    r = client.post(
        "/api/v1/adoptions",
        headers=admin_headers,
        json={"projectId": str(project.id), "adopterId": str(adopter.id), "animalId": animal_id},
    )
    assert r.status_code == 400


def test_non_privileged_employee_denied_update(client, project, adoption):
    employee = make_user("Funcionario")
    make_employee(employee, project, privileged=False)
    r = client.post(
        f"/api/v1/adoptions/{adoption.id}/updates", headers=headers_for(employee), json={"status": "ok"}
    )
    assert r.status_code == 403
    assert AdoptionUpdate.query.count() == 0


def test_privileged_employee_creates_update(client, project, adoption):
    employee = make_user("Funcionario")
    make_employee(employee, project, privileged=True)
    r = client.post(
        f"/api/v1/adoptions/{adoption.id}/updates",
        headers=headers_for(employee),
        json={"status": "visita_agendada", "nextDate": "2030-01-15", "note": "ligar antes"},
    )
    assert r.status_code == 201, r.text
    body = r.get_json()
    assert body["responsibleId"] == str(employee.id)
    assert body["nextDate"] == "2030-01-15"
    assert db.session.get(Adoption, adoption.id).lt_atualizacao == date.today()


def test_employee_of_other_project_denied(client, adoption):
    employee = make_user("Funcionario")
    make_employee(employee, make_project(), privileged=True)
    r = client.post(
        f"/api/v1/adoptions/{adoption.id}/updates", headers=headers_for(employee), json={"status": "ok"}
    )
    assert r.status_code == 403


def test_update_status_is_validated(client, admin_headers, adoption):
    r = client.post(f"/api/v1/adoptions/{adoption.id}/updates", headers=admin_headers, json={"status": "feliz"})
    assert r.status_code == 400
    r = client.post(f"/api/v1/adoptions/{adoption.id}/updates", headers=admin_headers, json={})
    assert r.status_code == 400


def test_responsible_must_be_privileged(client, admin_headers, project, adoption):
    plain = make_user("Funcionario")
    make_employee(plain, project, privileged=False)
    r = client.post(
        f"/api/v1/adoptions/{adoption.id}/updates",
        headers=admin_headers,
        json={"status": "pendente", "responsibleId": str(plain.id)},
    )
    assert r.status_code == 403

    boss = make_user("Funcionario")
    make_employee(boss, project, privileged=True)
    r = client.post(
        f"/api/v1/adoptions/{adoption.id}/updates",
        headers=admin_headers,
        json={"status": "pendente", "responsibleId": str(boss.id)},
    )
    assert r.status_code == 201, r.text
    assert r.get_json()["responsibleId"] == str(boss.id)


def test_edit_list_and_delete_updates(client, admin_headers, project, adoption):
    employee = make_user("Funcionario")
    make_employee(employee, project, privileged=True)
    headers = headers_for(employee)

    r = client.post(f"/api/v1/adoptions/{adoption.id}/updates", headers=headers, json={"status": "sem_resposta"})
    update_id = r.get_json()["id"]

    r = client.patch(f"/api/v1/adoptions/updates/{update_id}", headers=headers, json={"status": "ok"})
    assert r.status_code == 200, r.text
    assert r.get_json()["status"] == "ok"

    r = client.get(f"/api/v1/adoptions/{adoption.id}/updates", headers=headers)
    assert [u["id"] for u in r.get_json()] == [update_id]

    # exclusão é de nível administrativo
    r = client.delete(f"/api/v1/adoptions/updates/{update_id}", headers=headers)
    assert r.status_code == 403
    r = client.delete(f"/api/v1/adoptions/updates/{update_id}", headers=admin_headers)
    assert r.status_code == 204


def test_delete_adoption_removes_updates(client, admin_headers, adoption):
    client.post(f"/api/v1/adoptions/{adoption.id}/updates", headers=admin_headers, json={"status": "ok"})
    r = client.delete(f"/api/v1/adoptions/{adoption.id}", headers=admin_headers)
    assert r.status_code == 204
    assert Adoption.query.count() == 0
    assert AdoptionUpdate.query.count() == 0


def test_unknown_adoption(client, admin_headers, app):
    r = client.get("/api/v1/adoptions/not-a-uuid", headers=admin_headers)
    assert r.status_code == 400
    r = client.get("/api/v1/adoptions/00000000-0000-0000-0000-000000000000", headers=admin_headers)
    assert r.status_code == 404


def test_adopter_reads_own_adoption_only(client, admin_headers, adopter, adoption):
    client.post(f"/api/v1/adoptions/{adoption.id}/updates", headers=admin_headers, json={"status": "ok", "note": "visita feita"})

    r = client.get(f"/api/v1/adoptions/{adoption.id}", headers=headers_for(adopter))
    assert r.status_code == 200, r.text
    r = client.get(f"/api/v1/adoptions/{adoption.id}/updates", headers=headers_for(adopter))
    assert [u["note"] for u in r.get_json()] == ["visita feita"]

    stranger = make_user("Adotante")
    r = client.get(f"/api/v1/adoptions/{adoption.id}", headers=headers_for(stranger))
    assert r.status_code == 403
    r = client.get(f"/api/v1/adoptions/{adoption.id}/updates", headers=headers_for(stranger))
    assert r.status_code == 403
