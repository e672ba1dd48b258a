import uuid

from pawhub_api.extensions import db
from pawhub_api.models import Address, User
from pawhub_api.services.users import count_super_admins

from conftest import headers_for, make_user, rand_email


def _new_user(roles, **extra):
    payload = {"name": "Novo", "email": rand_email(), "roles": roles}
    payload.update(extra)
    return payload


def test_second_super_admin_allowed_third_rejected(client, super_admin, sa_headers):
    r = client.post("/api/v1/users", headers=sa_headers, json=_new_user(["SuperAdmin"]))
    assert r.status_code == 201, r.text
    assert count_super_admins() == 2

    r = client.post("/api/v1/users", headers=sa_headers, json=_new_user(["SuperAdmin"]))
    assert r.status_code == 400
    assert r.get_json() == {"error": "Limite de 2 SuperAdmins atingido", "kind": "InvalidInput"}
    assert count_super_admins() == 2


def test_cap_also_applies_to_role_grant(client, super_admin, sa_headers):
    make_user("SuperAdmin")
    other = make_user("Adotante")
    r = client.post(f"/api/v1/users/{other.id}/roles", headers=sa_headers, json={"role": "SuperAdmin"})
    assert r.status_code == 400
    assert "SuperAdmin" not in db.session.get(User, other.id).roles


def test_admin_cannot_create_elevated_users(client, admin_headers):
    r = client.post("/api/v1/users", headers=admin_headers, json=_new_user(["Administrador"]))
    assert r.status_code == 403

    r = client.post("/api/v1/users", headers=admin_headers, json=_new_user(["Funcionario"]))
    assert r.status_code == 201, r.text


def test_unknown_role_is_invalid_input(client, sa_headers):
    r = client.post("/api/v1/users", headers=sa_headers, json=_new_user(["Gerente"]))
    assert r.status_code == 400


def test_duplicate_email_and_cpf_conflict(client, sa_headers):
    make_user("Adotante", email="dup@x.com", cpf="12345678901")
    r = client.post("/api/v1/users", headers=sa_headers, json=_new_user(["Adotante"], email="dup@x.com"))
    assert r.status_code == 409
    r = client.post("/api/v1/users", headers=sa_headers, json=_new_user(["Adotante"], cpf="123.456.789-01"))
    assert r.status_code == 409
    assert r.get_json()["error"] == "CPF já cadastrado"


def test_listing_hides_anonymous_donors(client, admin, admin_headers):
    visible = make_user("Doador", name="Fulano")
    anon = make_user("Doador", name="Doação Anônima", password=None)
    by_email = make_user("Doador", email="anonimo_1_abcd@temp.com", password=None)
    by_cpf = make_user("Doador", cpf="00000000000", password=None)

    r = client.get("/api/v1/users?pageSize=100", headers=admin_headers)
    assert r.status_code == 200, r.text
    ids = {u["id"] for u in r.get_json()["items"]}
    assert str(visible.id) in ids
    assert str(admin.id) in ids
    for hidden in (anon, by_email, by_cpf):
        assert str(hidden.id) not in ids

    # busca direta por id continua funcionando
    r = client.get(f"/api/v1/users/{anon.id}", headers=admin_headers)
    assert r.status_code == 200
    assert r.get_json()["name"] == "Doação Anônima"


def test_listing_search_and_pagination(client, admin_headers):
    for i in range(3):
        make_user("Voluntario", name=f"Voluntario {i}")
    r = client.get("/api/v1/users?q=voluntario&page=1&pageSize=2", headers=admin_headers)
    body = r.get_json()
    assert body["total"] == 3
    assert len(body["items"]) == 2
    r = client.get("/api/v1/users?page=0", headers=admin_headers)
    assert r.status_code == 400


def test_listing_requires_staff_role(client, app):
    adopter = make_user("Adotante")
    r = client.get("/api/v1/users", headers=headers_for(adopter))
    assert r.status_code == 403


def test_user_edits_own_profile_but_not_others(client, app):
    me = make_user("Adotante")
    other = make_user("Adotante")
    r = client.patch(f"/api/v1/users/{me.id}", headers=headers_for(me), json={"phone": "85999990000"})
    assert r.status_code == 200, r.text
    assert r.get_json()["phone"] == "85999990000"

    r = client.patch(f"/api/v1/users/{other.id}", headers=headers_for(me), json={"phone": "1"})
    assert r.status_code == 403

    r = client.patch(f"/api/v1/users/{me.id}", headers=headers_for(me), json={"active": False})
    assert r.status_code == 403


def test_address_created_then_updated_in_place(client, app):
    me = make_user("Adotante")
    address = {"postalCode": "01310-930", "district": "Bela Vista", "city": "São Paulo", "state": "SP"}
    r = client.patch(f"/api/v1/users/{me.id}", headers=headers_for(me), json={"address": address})
    assert r.status_code == 200, r.text
    first = r.get_json()["address"]
    assert first["postalCode"] == "01310930"

    address["street"] = "Av. Paulista"
    address["number"] = "1000"
    r = client.patch(f"/api/v1/users/{me.id}", headers=headers_for(me), json={"address": address})
    second = r.get_json()["address"]
    assert second["id"] == first["id"]
    assert second["street"] == "Av. Paulista"
    assert Address.query.count() == 1


def test_incomplete_address_is_ignored(client, app):
    me = make_user("Adotante")
    r = client.patch(f"/api/v1/users/{me.id}", headers=headers_for(me), json={"city": "Fortaleza"})
    assert r.status_code == 200
    assert r.get_json()["address"] is None
    assert Address.query.count() == 0


def test_set_password_self_or_admin(client, admin_headers):
    me = make_user("Voluntario")
    r = client.put(f"/api/v1/users/{me.id}/password", headers=headers_for(me), json={"password": "nova-senha"})
    assert r.status_code == 204
    r = client.post("/api/v1/auth/login", json={"email": me.email, "password": "nova-senha"})
    assert r.status_code == 200

    other = make_user("Voluntario")
    r = client.put(f"/api/v1/users/{other.id}/password", headers=headers_for(me), json={"password": "x" * 8})
    assert r.status_code == 403
    r = client.put(f"/api/v1/users/{other.id}/password", headers=admin_headers, json={"password": "x" * 8})
    assert r.status_code == 204


def test_promote_to_admin_is_super_admin_only(client, sa_headers, admin_headers):
    user = make_user("Funcionario")
    r = client.post(f"/api/v1/users/{user.id}/promote-admin", headers=admin_headers)
    assert r.status_code == 403
    r = client.post(f"/api/v1/users/{user.id}/promote-admin", headers=sa_headers)
    assert r.status_code == 200, r.text
    assert r.get_json()["roles"] == ["Administrador", "Funcionario"]


def test_revoke_last_role_rejected(client, admin_headers):
    user = make_user("Voluntario")
    r = client.delete(f"/api/v1/users/{user.id}/roles/Voluntario", headers=admin_headers)
    assert r.status_code == 400

    r = client.post(f"/api/v1/users/{user.id}/roles", headers=admin_headers, json={"role": "Doador"})
    assert r.get_json()["roles"] == ["Voluntario", "Doador"]
    r = client.delete(f"/api/v1/users/{user.id}/roles/Voluntario", headers=admin_headers)
    assert r.get_json()["roles"] == ["Doador"]


def test_delete_user(client, admin, admin_headers):
    user = make_user("Adotante")
    r = client.delete(f"/api/v1/users/{user.id}", headers=admin_headers)
    assert r.status_code == 204
    assert db.session.get(User, user.id) is None

    r = client.delete(f"/api/v1/users/{admin.id}", headers=admin_headers)
    assert r.status_code == 400

    r = client.get(f"/api/v1/users/{uuid.uuid4()}", headers=admin_headers)
    assert r.status_code == 404


def test_admin_cannot_take_over_super_admin(client, super_admin, admin_headers):
    r = client.put(f"/api/v1/users/{super_admin.id}/password", headers=admin_headers, json={"password": "outra-senha"})
    assert r.status_code == 403
    r = client.post("/api/v1/auth/login", json={"email": super_admin.email, "password": "outra-senha"})
    assert r.status_code == 401

    r = client.patch(f"/api/v1/users/{super_admin.id}", headers=admin_headers, json={"email": "eu@x.com"})
    assert r.status_code == 403
    r = client.patch(f"/api/v1/users/{super_admin.id}", headers=admin_headers, json={"active": False})
    assert r.status_code == 403
    r = client.delete(f"/api/v1/users/{super_admin.id}", headers=admin_headers)
    assert r.status_code == 403

    sa = db.session.get(User, super_admin.id)
    assert sa.ativo is True
    assert sa.email != "eu@x.com"


def test_admin_cannot_manage_other_administrators(client, admin_headers, sa_headers):
    peer = make_user("Administrador")
    r = client.put(f"/api/v1/users/{peer.id}/password", headers=admin_headers, json={"password": "x" * 8})
    assert r.status_code == 403
    r = client.delete(f"/api/v1/users/{peer.id}/roles/Administrador", headers=admin_headers)
    assert r.status_code == 403

    # SuperAdmin continua podendo
    r = client.put(f"/api/v1/users/{peer.id}/password", headers=sa_headers, json={"password": "x" * 8})
    assert r.status_code == 204
    r = client.delete(f"/api/v1/users/{peer.id}", headers=sa_headers)
    assert r.status_code == 204


def test_admin_still_edits_own_profile(client, admin, admin_headers):
    r = client.patch(f"/api/v1/users/{admin.id}", headers=admin_headers, json={"phone": "85911112222"})
    assert r.status_code == 200, r.text
    r = client.put(f"/api/v1/users/{admin.id}/password", headers=admin_headers, json={"password": "nova-senha"})
    assert r.status_code == 204


def test_reserved_anonymous_values_are_rejected(client, admin_headers):
    me = make_user("Adotante")
    r = client.patch(f"/api/v1/users/{me.id}", headers=headers_for(me), json={"cpf": "000.000.000-00"})
    assert r.status_code == 400
    r = client.patch(f"/api/v1/users/{me.id}", headers=headers_for(me), json={"name": "Doação Anônima"})
    assert r.status_code == 400

    r = client.post(
        "/api/v1/auth/register",
        json={"name": "Fulano", "email": "anonimo_1_x@temp.com", "password": "segredo123"},
    )
    assert r.status_code == 400

    r = client.get("/api/v1/users?pageSize=100", headers=admin_headers)
    assert str(me.id) in {u["id"] for u in r.get_json()["items"]}


def test_read_by_id_is_self_or_staff(client, admin_headers):
    me = make_user("Adotante", cpf="98765432100")
    other = make_user("Adotante")
    r = client.get(f"/api/v1/users/{me.id}", headers=headers_for(me))
    assert r.status_code == 200
    assert r.get_json()["cpf"] == "98765432100"

    r = client.get(f"/api/v1/users/{me.id}", headers=headers_for(other))
    assert r.status_code == 403

    employee = make_user("Funcionario")
    r = client.get(f"/api/v1/users/{me.id}", headers=headers_for(employee))
    assert r.status_code == 200
