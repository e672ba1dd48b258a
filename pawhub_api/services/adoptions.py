"""
Adoções e o acompanhamento pós-adoção (atualizacoes_adocao).

Toda atualização criada reescreve adocoes.lt_atualizacao com a data do dia.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional

from pawhub_api.extensions import db
from pawhub_api.domain.policy import Action
from pawhub_api.domain.roles import Role
from pawhub_api.models import Adoption, AdoptionUpdate, Animal, Project, User
from pawhub_api.services import authorization
from pawhub_api.services.base import (
    clean_str,
    commit,
    get_or_404,
    parse_date,
    parse_optional_uuid,
    parse_uuid,
)
from pawhub_api.utils.errors import Forbidden, InvalidInput

UPDATE_STATUSES = ("ok", "pendente", "visita_agendada", "sem_resposta")


def parse_status(value, required: bool = True) -> Optional[str]:
    token = clean_str(value)
    if token is None:
        if required:
            raise InvalidInput("status é obrigatório")
        return None
    token = token.lower()
    if token not in UPDATE_STATUSES:
        raise InvalidInput(f"status inválido (use {', '.join(UPDATE_STATUSES)})")
    return token


@dataclass(frozen=True)
class AdoptionInput:
    project_id: Optional[Any] = None
    adopter_id: Optional[Any] = None
    animal_id: Optional[Any] = None
    dt_adocao: Optional[date] = None
    observacao: Optional[str] = None

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "AdoptionInput":
        return cls(
            project_id=parse_optional_uuid(data.get("projectId"), "projectId"),
            adopter_id=parse_optional_uuid(data.get("adopterId"), "adopterId"),
            animal_id=parse_optional_uuid(data.get("animalId"), "animalId"),
            dt_adocao=parse_date(data.get("adoptionDate"), "adoptionDate"),
            observacao=clean_str(data.get("note")),
        )


# --- Adoções ------------------------------------------------------------------

def list_adoptions(project_id=None, adopter_id=None):
    qry = Adoption.query
    if project_id is not None:
        qry = qry.filter(Adoption.id_projeto == project_id)
    if adopter_id is not None:
        qry = qry.filter(Adoption.id_adotante == adopter_id)
    return qry.order_by(Adoption.dt_adocao.desc()).all()


def get_adoption(adoption_id) -> Adoption:
    return get_or_404(Adoption, parse_uuid(adoption_id, "id"), "Adoção não encontrada")


def view_adoption(actor: User, adoption_id) -> Adoption:
    adoption = get_adoption(adoption_id)
    authorization.require_self_or_staff(actor, adoption.id_adotante, "a adoção")
    return adoption


def _check_adopter(adopter_id) -> User:
    adopter = get_or_404(User, adopter_id, "Adotante não encontrado")
    if Role.ADOPTER not in adopter.role_set:
        raise InvalidInput("O usuário informado não é Adotante")
    return adopter


def _check_animal(animal_id, project_id) -> Animal:
    animal = get_or_404(Animal, animal_id, "Animal não encontrado")
    if animal.id_projeto != project_id:
        raise InvalidInput("O animal não pertence a este projeto")
    return animal


def create_adoption(actor: User, command: AdoptionInput) -> Adoption:
    if command.project_id is None or command.adopter_id is None or command.animal_id is None:
        raise InvalidInput("projectId, adopterId e animalId são obrigatórios")
    authorization.require(actor, Action.CREATE_ADOPTION, command.project_id)

    get_or_404(Project, command.project_id, "Projeto não encontrado")
    _check_adopter(command.adopter_id)
    _check_animal(command.animal_id, command.project_id)

    adoption = Adoption(
        id_projeto=command.project_id,
        id_adotante=command.adopter_id,
        id_animal=command.animal_id,
        dt_adocao=command.dt_adocao or date.today(),
        observacao=command.observacao,
    )
    db.session.add(adoption)
    commit()
    return adoption


def update_adoption(actor: User, adoption_id, command: AdoptionInput) -> Adoption:
    adoption = get_adoption(adoption_id)
    authorization.require(actor, Action.UPDATE_ADOPTION, adoption.id_projeto)

    if command.adopter_id is not None:
        _check_adopter(command.adopter_id)
        adoption.id_adotante = command.adopter_id
    if command.animal_id is not None:
        _check_animal(command.animal_id, adoption.id_projeto)
        adoption.id_animal = command.animal_id
    if command.dt_adocao is not None:
        adoption.dt_adocao = command.dt_adocao
    if command.observacao is not None:
        adoption.observacao = command.observacao
    commit()
    return adoption


def delete_adoption(actor: User, adoption_id) -> None:
    adoption = get_adoption(adoption_id)
    authorization.require(actor, Action.DELETE_ADOPTION, adoption.id_projeto)
    AdoptionUpdate.query.filter(AdoptionUpdate.id_adocao == adoption.id).delete(synchronize_session=False)
    db.session.delete(adoption)
    commit()


# --- Atualizações de adoção ---------------------------------------------------

def list_updates(actor: User, adoption_id):
    adoption = view_adoption(actor, adoption_id)
    return adoption.updates.order_by(AdoptionUpdate.criado_em.desc()).all()


def get_update(update_id) -> AdoptionUpdate:
    return get_or_404(AdoptionUpdate, parse_uuid(update_id, "id"), "Atualização de adoção não encontrada")


def create_update(actor: User, adoption_id, data: Dict[str, Any]) -> AdoptionUpdate:
    """Registra um acompanhamento.

    O responsável (responsibleId, padrão: quem está agindo) precisa poder
    administrar o projeto da adoção: SuperAdmin, Administrador ou funcionário
    com privilégios nesse projeto.
    """
    adoption = get_adoption(adoption_id)
    project_id = adoption.id_projeto
    authorization.require(actor, Action.CREATE_ADOPTION_UPDATE, project_id)

    responsible_id = parse_optional_uuid(data.get("responsibleId"), "responsibleId") or actor.id
    responsible = actor
    if responsible_id != actor.id:
        responsible = get_or_404(User, responsible_id, "Responsável não encontrado")
        if not authorization.can_perform(responsible, Action.CREATE_ADOPTION_UPDATE, project_id):
            raise Forbidden("O responsável não tem privilégios neste projeto")

    update = AdoptionUpdate(
        id_adocao=adoption.id,
        id_responsavel=responsible.id,
        status=parse_status(data.get("status")),
        dt_proxima=parse_date(data.get("nextDate"), "nextDate"),
        observacao=clean_str(data.get("note")),
    )
    db.session.add(update)
    adoption.lt_atualizacao = date.today()
    commit()
    return update


def edit_update(actor: User, update_id, data: Dict[str, Any]) -> AdoptionUpdate:
    update = get_update(update_id)
    project_id = update.adoption.id_projeto
    authorization.require(actor, Action.EDIT_ADOPTION_UPDATE, project_id)

    status = parse_status(data.get("status"), required=False)
    if status is not None:
        update.status = status
    if "nextDate" in data:
        update.dt_proxima = parse_date(data.get("nextDate"), "nextDate")
    note = clean_str(data.get("note"))
    if note is not None:
        update.observacao = note
    commit()
    return update


def delete_update(actor: User, update_id) -> None:
    update = get_update(update_id)
    authorization.require(actor, Action.DELETE_ADOPTION_UPDATE, update.adoption.id_projeto)
    db.session.delete(update)
    commit()
