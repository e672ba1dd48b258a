from decimal import Decimal

from pawhub_api.extensions import db
from pawhub_api.models import Donation, Donor, User

from conftest import headers_for, make_employee, make_user


def _donate(client, headers, project, user=None, **payload):
    body = {"projectId": str(project.id)}
    if user is not None:
        body["userId"] = str(user.id)
    body.update(payload)
    return client.post("/api/v1/donations", headers=headers, json=body)


def test_financial_donation_round_trip(client, admin_headers, project):
    donor = make_user("Doador")
    r = _donate(client, admin_headers, project, donor, aidType="Financeira", paymentMethod="pix", amount=50.0)
    assert r.status_code == 201, r.text
    body = r.get_json()
    assert (body["aidType"], body["paymentMethod"], body["amount"]) == ("Financeira", "Pix", 50.0)

    row = Donation.query.one()
    assert (row.tp_ajuda, row.tp_pagamento) == ("FINANCEIRA", "PIX")
    assert row.valor == Decimal("50")

    r = client.get(f"/api/v1/donations/{body['id']}", headers=admin_headers)
    assert r.get_json()["aidType"] == "Financeira"


def test_financial_defaults_to_pix(client, admin_headers, project):
    donor = make_user("Doador")
    r = _donate(client, admin_headers, project, donor, aidType="Financeira", amount="20.5")
    assert r.status_code == 201, r.text
    assert r.get_json()["paymentMethod"] == "Pix"


def test_financial_requires_amount(client, admin_headers, project):
    donor = make_user("Doador")
    r = _donate(client, admin_headers, project, donor, aidType="Financeira", paymentMethod="Pix")
    assert r.status_code == 400
    r = _donate(client, admin_headers, project, donor, aidType="Financeira", amount=0)
    assert r.status_code == 400
    assert Donation.query.count() == 0


def test_items_donation_drops_amount_and_payment(client, admin_headers, project):
    donor = make_user("Doador")
    r = _donate(
        client, admin_headers, project, donor,
        aidType="Itens", paymentMethod="Pix", amount=99, items="20kg de ração",
    )
    assert r.status_code == 201, r.text
    body = r.get_json()
    assert body["amount"] is None
    assert body["paymentMethod"] is None
    assert body["items"] == "20kg de ração"


def test_other_and_unknown_aid_types(client, admin_headers, project):
    donor = make_user("Doador")
    r = _donate(client, admin_headers, project, donor, aidType="Outro", amount=10, items="x")
    body = r.get_json()
    assert (body["aidType"], body["amount"], body["items"]) == ("Outro", None, None)

    r = _donate(client, admin_headers, project, donor, aidType="mutirao")
    assert r.status_code == 201
    assert r.get_json()["aidType"] == "MUTIRAO"


def test_donation_creates_donor_association(client, admin_headers, project):
    user = make_user("Voluntario")
    r = _donate(client, admin_headers, project, user, aidType="Itens", items="cobertores")
    assert r.status_code == 201, r.text
    assert db.session.get(Donor, (user.id, project.id)) is not None
    assert "Doador" in db.session.get(User, user.id).roles


def test_donor_can_donate_as_self_only(client, project):
    donor = make_user("Doador")
    other = make_user("Doador")
    r = _donate(client, headers_for(donor), project, donor, aidType="Itens", items="ração")
    assert r.status_code == 201, r.text
    r = _donate(client, headers_for(donor), project, other, aidType="Itens", items="ração")
    assert r.status_code == 403


def test_adopter_cannot_donate_for_self(client, project):
    adopter = make_user("Adotante")
    r = _donate(client, headers_for(adopter), project, adopter, aidType="Itens", items="ração")
    assert r.status_code == 403


def test_non_privileged_employee_cannot_record_donation(client, project):
    employee = make_user("Funcionario")
    make_employee(employee, project)
    donor = make_user("Doador")
    r = _donate(client, headers_for(employee), project, donor, aidType="Itens", items="ração")
    assert r.status_code == 403


def test_anonymous_donation(client, admin_headers, project):
    r = _donate(client, admin_headers, project, aidType="Financeira", amount=10, anonymous=True)
    assert r.status_code == 201, r.text
    owner_id = r.get_json()["userId"]

    owner = User.query.filter(User.nome == "Doação Anônima").one()
    assert str(owner.id) == owner_id
    assert owner.is_anonymous_donor
    assert owner.email.startswith("anonimo_") and owner.email.endswith("@temp.com")

    # some da listagem, continua acessível por id e dono das doações
    r = client.get("/api/v1/users?pageSize=100", headers=admin_headers)
    assert owner_id not in {u["id"] for u in r.get_json()["items"]}
    r = client.get(f"/api/v1/users/{owner_id}", headers=admin_headers)
    assert r.status_code == 200
    r = client.get(f"/api/v1/donations?userId={owner_id}", headers=admin_headers)
    assert len(r.get_json()) == 1

    # segunda doação anônima não esbarra na unicidade de CPF
    r = _donate(client, admin_headers, project, aidType="Itens", items="ração", anonymous=True)
    assert r.status_code == 201, r.text


def test_missing_user_and_project(client, admin_headers, project):
    r = client.post("/api/v1/donations", headers=admin_headers, json={"projectId": str(project.id)})
    assert r.status_code == 400
    r = client.post("/api/v1/donations", headers=admin_headers, json={"userId": "nao-e-uuid"})
    assert r.status_code == 400


def test_update_switching_aid_type_revalidates(client, admin_headers, project):
    donor = make_user("Doador")
    r = _donate(client, admin_headers, project, donor, aidType="Financeira", amount=30)
    donation_id = r.get_json()["id"]

    r = client.patch(
        f"/api/v1/donations/{donation_id}", headers=admin_headers, json={"aidType": "Itens", "items": "brinquedos"}
    )
    assert r.status_code == 200, r.text
    body = r.get_json()
    assert (body["aidType"], body["amount"], body["paymentMethod"]) == ("Itens", None, None)

    r = client.patch(f"/api/v1/donations/{donation_id}", headers=admin_headers, json={"aidType": "Financeira"})
    assert r.status_code == 400


def test_update_and_delete_need_admin(client, project):
    donor = make_user("Doador")
    employee = make_user("Funcionario")
    make_employee(employee, project, privileged=True)
    r = _donate(client, headers_for(employee), project, donor, aidType="Itens", items="ração")
    assert r.status_code == 201, r.text
    donation_id = r.get_json()["id"]

    r = client.patch(f"/api/v1/donations/{donation_id}", headers=headers_for(employee), json={"note": "x"})
    assert r.status_code == 403
    r = client.delete(f"/api/v1/donations/{donation_id}", headers=headers_for(employee))
    assert r.status_code == 403


def test_donation_read_by_owner_or_staff(client, admin_headers, project):
    donor = make_user("Doador")
    r = _donate(client, headers_for(donor), project, donor, aidType="Itens", items="ração")
    donation_id = r.get_json()["id"]

    r = client.get(f"/api/v1/donations/{donation_id}", headers=headers_for(donor))
    assert r.status_code == 200
    r = client.get(f"/api/v1/donations/{donation_id}", headers=headers_for(make_user("Doador")))
    assert r.status_code == 403
    r = client.get(f"/api/v1/donations/{donation_id}", headers=admin_headers)
    assert r.status_code == 200
