# routes/adoptions.py
from flask import Blueprint, request

from pawhub_api.auth.middleware import actor_required, current_actor
from pawhub_api.models import Adoption, AdoptionUpdate
from pawhub_api.routes.serializers import iso
from pawhub_api.services import adoptions as adoption_service
from pawhub_api.services.base import parse_optional_uuid
from pawhub_api.utils.rbac import STAFF_ROLES, require_roles
from pawhub_api.utils.responses import created, no_content, ok

# Blueprint sem prefixo interno; app.py define /api/v1/adoptions
bp = Blueprint("adoptions", __name__)


def _camel_update(u: AdoptionUpdate) -> dict:
    return {
        "id": str(u.id),
        "adoptionId": str(u.id_adocao),
        "responsibleId": str(u.id_responsavel),
        "status": u.status,
        "nextDate": iso(u.dt_proxima),
        "note": u.observacao,
        "createdAt": iso(u.criado_em),
    }


def _camel_adoption(a: Adoption) -> dict:
    return {
        "id": str(a.id),
        "projectId": str(a.id_projeto),
        "adopterId": str(a.id_adotante),
        "animalId": str(a.id_animal),
        "adoptionDate": iso(a.dt_adocao),
        "lastUpdate": iso(a.lt_atualizacao),
        "note": a.observacao,
    }


@bp.get("")
@actor_required()
@require_roles(*STAFF_ROLES)
def list_adoptions():
    """Query: projectId, adopterId"""
    items = adoption_service.list_adoptions(
        project_id=parse_optional_uuid(request.args.get("projectId"), "projectId"),
        adopter_id=parse_optional_uuid(request.args.get("adopterId"), "adopterId"),
    )
    return ok([_camel_adoption(a) for a in items])


@bp.get("/<adoption_id>")
@actor_required()
def get_adoption(adoption_id):
    return ok(_camel_adoption(adoption_service.view_adoption(current_actor(), adoption_id)))


@bp.post("")
@actor_required()
def create_adoption():
    payload = request.get_json(silent=True) or {}
    command = adoption_service.AdoptionInput.from_payload(payload)
    return created(_camel_adoption(adoption_service.create_adoption(current_actor(), command)))


@bp.patch("/<adoption_id>")
@actor_required()
def update_adoption(adoption_id):
    payload = request.get_json(silent=True) or {}
    command = adoption_service.AdoptionInput.from_payload(payload)
    return ok(_camel_adoption(adoption_service.update_adoption(current_actor(), adoption_id, command)))


@bp.delete("/<adoption_id>")
@actor_required()
def delete_adoption(adoption_id):
    adoption_service.delete_adoption(current_actor(), adoption_id)
    return no_content()


# ---- Acompanhamento ----

@bp.get("/<adoption_id>/updates")
@actor_required()
def list_updates(adoption_id):
    return ok([_camel_update(u) for u in adoption_service.list_updates(current_actor(), adoption_id)])


@bp.post("/<adoption_id>/updates")
@actor_required()
def create_update(adoption_id):
    """Body JSON: {status, nextDate?, note?, responsibleId?}"""
    payload = request.get_json(silent=True) or {}
    return created(_camel_update(adoption_service.create_update(current_actor(), adoption_id, payload)))


@bp.patch("/updates/<update_id>")
@actor_required()
def edit_update(update_id):
    payload = request.get_json(silent=True) or {}
    return ok(_camel_update(adoption_service.edit_update(current_actor(), update_id, payload)))


@bp.delete("/updates/<update_id>")
@actor_required()
def delete_update(update_id):
    adoption_service.delete_update(current_actor(), update_id)
    return no_content()
