# routes/animals.py
from flask import Blueprint, request

from pawhub_api.auth.middleware import actor_required, current_actor
from pawhub_api.models import Animal
from pawhub_api.routes.serializers import iso
from pawhub_api.services import animals as animal_service
from pawhub_api.services.base import parse_optional_uuid
from pawhub_api.utils.responses import created, no_content, ok

# Blueprint sem prefixo interno; app.py define /api/v1/animals
bp = Blueprint("animals", __name__)


def _camel_animal(a: Animal) -> dict:
    return {
        "id": str(a.id),
        "projectId": str(a.id_projeto),
        "name": a.nome,
        "species": a.especie,
        "breed": a.raca,
        "status": a.status,
        "intakeDate": iso(a.entrada),
        "note": a.observacao,
    }


@bp.get("")
@actor_required()
def list_animals():
    """Query: projectId, status. Aberta a qualquer usuário autenticado (vitrine de adoção)."""
    items = animal_service.list_animals(
        project_id=parse_optional_uuid(request.args.get("projectId"), "projectId"),
        status=animal_service.parse_animal_status(request.args.get("status")),
    )
    return ok([_camel_animal(a) for a in items])


@bp.get("/<animal_id>")
@actor_required()
def get_animal(animal_id):
    return ok(_camel_animal(animal_service.get_animal(animal_id)))


@bp.post("")
@actor_required()
def create_animal():
    """Body JSON: {projectId, name, species?, breed?, status?, intakeDate?, note?}"""
    payload = request.get_json(silent=True) or {}
    command = animal_service.AnimalInput.from_payload(payload)
    return created(_camel_animal(animal_service.create_animal(current_actor(), command)))


@bp.patch("/<animal_id>")
@actor_required()
def update_animal(animal_id):
    payload = request.get_json(silent=True) or {}
    command = animal_service.AnimalInput.from_payload(payload)
    return ok(_camel_animal(animal_service.update_animal(current_actor(), animal_id, command)))


@bp.delete("/<animal_id>")
@actor_required()
def delete_animal(animal_id):
    animal_service.delete_animal(current_actor(), animal_id)
    return no_content()
