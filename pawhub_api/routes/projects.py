# routes/projects.py
from flask import Blueprint, request

from pawhub_api.auth.middleware import actor_required, current_actor
from pawhub_api.models import Project
from pawhub_api.routes.serializers import camel_address, iso
from pawhub_api.services import projects as project_service
from pawhub_api.utils.responses import created, no_content, ok

# Blueprint sem prefixo interno; app.py define /api/v1/projects
bp = Blueprint("projects", __name__)


def _camel_project(p: Project) -> dict:
    return {
        "id": str(p.id),
        "name": p.nome,
        "phone": p.telefone,
        "email": p.email,
        "instagram": p.instagram,
        "address": camel_address(p.endereco),
        "createdAt": iso(p.criado_em),
    }


@bp.get("")
@actor_required()
def list_projects():
    return ok([_camel_project(p) for p in project_service.list_projects(current_actor())])


@bp.get("/<project_id>")
@actor_required()
def get_project(project_id):
    return ok(_camel_project(project_service.get_project(project_id)))


@bp.post("")
@actor_required()
def create_project():
    payload = request.get_json(silent=True) or {}
    command = project_service.ProjectInput.from_payload(payload)
    return created(_camel_project(project_service.create_project(current_actor(), command)))


@bp.patch("/<project_id>")
@actor_required()
def update_project(project_id):
    payload = request.get_json(silent=True) or {}
    command = project_service.ProjectInput.from_payload(payload)
    return ok(_camel_project(project_service.update_project(current_actor(), project_id, command)))


@bp.delete("/<project_id>")
@actor_required()
def delete_project(project_id):
    project_service.delete_project(current_actor(), project_id)
    return no_content()
