"""
Animais do abrigo.

Cadastro e edição são ações de equipe (funcionário precisa de privilégio no
projeto do animal); exclusão fica com SuperAdmin/Administrador.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional

from pawhub_api.extensions import db
from pawhub_api.domain.policy import Action
from pawhub_api.models import Adoption, Animal, Project, User
from pawhub_api.services import authorization
from pawhub_api.services.base import (
    clean_str,
    commit,
    get_or_404,
    parse_date,
    parse_optional_uuid,
    parse_uuid,
)
from pawhub_api.utils.errors import Conflict, InvalidInput

STATUSES = ("Disponivel", "Adotado", "Falecido", "Resgatado", "Em Tratamento")
DEFAULT_STATUS = "Disponivel"

_STATUS_LOOKUP = {s.lower(): s for s in STATUSES}


def parse_animal_status(value) -> Optional[str]:
    token = clean_str(value)
    if token is None:
        return None
    status = _STATUS_LOOKUP.get(token.lower().replace("_", " "))
    if status is None:
        raise InvalidInput(f"status inválido (use {', '.join(STATUSES)})")
    return status


@dataclass(frozen=True)
class AnimalInput:
    project_id: Optional[Any] = None
    nome: Optional[str] = None
    especie: Optional[str] = None
    raca: Optional[str] = None
    status: Optional[str] = None
    entrada: Optional[date] = None
    observacao: Optional[str] = None

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "AnimalInput":
        return cls(
            project_id=parse_optional_uuid(data.get("projectId"), "projectId"),
            nome=clean_str(data.get("name")),
            especie=clean_str(data.get("species")),
            raca=clean_str(data.get("breed")),
            status=parse_animal_status(data.get("status")),
            entrada=parse_date(data.get("intakeDate"), "intakeDate"),
            observacao=clean_str(data.get("note")),
        )


def list_animals(project_id=None, status: Optional[str] = None):
    qry = Animal.query
    if project_id is not None:
        qry = qry.filter(Animal.id_projeto == project_id)
    if status is not None:
        qry = qry.filter(Animal.status == status)
    return qry.order_by(Animal.entrada.desc(), Animal.nome).all()


def get_animal(animal_id) -> Animal:
    return get_or_404(Animal, parse_uuid(animal_id, "id"), "Animal não encontrado")


def create_animal(actor: User, command: AnimalInput) -> Animal:
    if command.project_id is None or not command.nome:
        raise InvalidInput("projectId e name são obrigatórios")
    authorization.require(actor, Action.CREATE_ANIMAL, command.project_id)
    get_or_404(Project, command.project_id, "Projeto não encontrado")

    animal = Animal(
        id_projeto=command.project_id,
        nome=command.nome,
        especie=command.especie,
        raca=command.raca,
        status=command.status or DEFAULT_STATUS,
        entrada=command.entrada or date.today(),
        observacao=command.observacao,
    )
    db.session.add(animal)
    commit()
    return animal


def update_animal(actor: User, animal_id, command: AnimalInput) -> Animal:
    animal = get_animal(animal_id)
    authorization.require(actor, Action.UPDATE_ANIMAL, animal.id_projeto)
    if command.project_id is not None and command.project_id != animal.id_projeto:
        raise InvalidInput("Não é possível mover o animal para outro projeto")

    for name in ("nome", "especie", "raca", "status", "entrada", "observacao"):
        value = getattr(command, name)
        if value is not None:
            setattr(animal, name, value)
    commit()
    return animal


def delete_animal(actor: User, animal_id) -> None:
    animal = get_animal(animal_id)
    authorization.require(actor, Action.DELETE_ANIMAL, animal.id_projeto)
    if Adoption.query.filter(Adoption.id_animal == animal.id).first() is not None:
        raise Conflict("Animal possui adoção registrada")
    db.session.delete(animal)
    commit()
