from __future__ import annotations

from typing import Optional

from flask import current_app

from pawhub_api.extensions import db
from pawhub_api.domain.policy import Action
from pawhub_api.domain.roles import Role, with_role
from pawhub_api.models import Administrator, Project, User
from pawhub_api.services import authorization
from pawhub_api.services.base import commit, get_or_404, get_or_none
from pawhub_api.utils.errors import Conflict


def list_administrators(project_id=None, user_id=None):
    qry = Administrator.query
    if project_id is not None:
        qry = qry.filter(Administrator.id_project == project_id)
    if user_id is not None:
        qry = qry.filter(Administrator.id_user == user_id)
    return qry.all()


def create_administrator(actor: User, user_id, project_id, observacao: Optional[str] = None) -> Administrator:
    """Vincula um usuário como administrador do projeto e garante a role Administrador."""
    authorization.require(actor, Action.MANAGE_ADMINISTRATORS, project_id)

    user = get_or_404(User, user_id, "Usuário não encontrado")
    get_or_404(Project, project_id, "Projeto não encontrado")
    if get_or_none(Administrator, (user_id, project_id)) is not None:
        raise Conflict("Usuário já é administrador deste projeto")

    link = Administrator(id_user=user_id, id_project=project_id, observacao=observacao)
    db.session.add(link)
    if Role.ADMINISTRATOR not in user.role_set:
        user.role_set = with_role(user.role_set, Role.ADMINISTRATOR)
    commit()
    current_app.logger.info("User %s is now administrator of project %s", user_id, project_id)
    return link


def delete_administrator(actor: User, user_id, project_id) -> None:
    authorization.require(actor, Action.MANAGE_ADMINISTRATORS, project_id)
    link = get_or_404(Administrator, (user_id, project_id), "Administrador não encontrado")
    db.session.delete(link)
    commit()
