from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from sqlalchemy import or_, select

from pawhub_api.extensions import db
from pawhub_api.domain.addresses import AddressFields
from pawhub_api.domain.policy import Action
from pawhub_api.domain.roles import Role
from pawhub_api.models import Administrator, Donor, Employee, Project, User, Volunteer
from pawhub_api.services import authorization
from pawhub_api.services.addresses import upsert_address
from pawhub_api.services.base import clean_str, commit, get_or_404, parse_uuid
from pawhub_api.utils.errors import InvalidInput


@dataclass(frozen=True)
class ProjectInput:
    nome: Optional[str] = None
    telefone: Optional[str] = None
    email: Optional[str] = None
    instagram: Optional[str] = None
    address: AddressFields = field(default_factory=AddressFields)

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "ProjectInput":
        return cls(
            nome=clean_str(data.get("name")),
            telefone=clean_str(data.get("phone")),
            email=clean_str(data.get("email")),
            instagram=clean_str(data.get("instagram")),
            address=AddressFields.from_payload(data),
        )


def list_projects(actor: User):
    """SuperAdmin vê todos; os demais, só os projetos onde têm vínculo."""
    qry = Project.query
    if Role.SUPER_ADMIN not in actor.role_set:
        memberships = [
            select(model.id_project).where(model.id_user == actor.id)
            for model in (Administrator, Employee, Donor, Volunteer)
        ]
        qry = qry.filter(or_(*(Project.id.in_(m) for m in memberships)))
    return qry.order_by(Project.nome).all()


def get_project(project_id) -> Project:
    return get_or_404(Project, parse_uuid(project_id, "id"), "Projeto não encontrado")


def create_project(actor: User, command: ProjectInput) -> Project:
    authorization.require(actor, Action.CREATE_PROJECT)
    if not command.nome:
        raise InvalidInput("name é obrigatório")

    project = Project(
        nome=command.nome,
        telefone=command.telefone,
        email=command.email,
        instagram=command.instagram,
    )
    project.endereco_id = upsert_address(None, command.address)
    db.session.add(project)
    commit()
    return project


def update_project(actor: User, project_id, command: ProjectInput) -> Project:
    project = get_project(project_id)
    authorization.require(actor, Action.UPDATE_PROJECT, project.id)

    for name in ("nome", "telefone", "email", "instagram"):
        value = getattr(command, name)
        if value is not None:
            setattr(project, name, value)
    project.endereco_id = upsert_address(project.endereco_id, command.address)
    commit()
    return project


def delete_project(actor: User, project_id) -> None:
    project = get_project(project_id)
    authorization.require(actor, Action.DELETE_PROJECT)
    db.session.delete(project)
    commit()
