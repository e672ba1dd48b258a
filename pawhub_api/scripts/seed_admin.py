"""Seed do primeiro SuperAdmin (DEV/TEST ou bootstrap de produção).

Lê SEED_ADMIN_EMAIL / SEED_ADMIN_PASSWORD / SEED_ADMIN_NAME do ambiente.
Respeita o limite de SuperAdmins: se o usuário já existe, só garante a role.
"""

import os

from flask import current_app

from pawhub_api.extensions import bcrypt
from pawhub_api.domain.roles import Role, with_role
from pawhub_api.services.base import commit
from pawhub_api.services.users import UserCreate, create_user, ensure_super_admin_slot, find_by_email

DEFAULT_EMAIL = "admin@pawhub.local"
DEFAULT_PASSWORD = "1234567890"


def run():
    email = os.getenv("SEED_ADMIN_EMAIL", DEFAULT_EMAIL).strip().lower()
    password = os.getenv("SEED_ADMIN_PASSWORD", DEFAULT_PASSWORD)
    name = os.getenv("SEED_ADMIN_NAME", "Super Admin")

    user = find_by_email(email)
    if user is None:
        user = create_user(
            UserCreate(nome=name, email=email, roles=frozenset({Role.SUPER_ADMIN}), senha=password)
        )
        current_app.logger.info("Seeded SuperAdmin %s", email)
        print(f"Seeded SuperAdmin: {email} / {password}")
        return user

    if Role.SUPER_ADMIN not in user.role_set:
        ensure_super_admin_slot()
        user.role_set = with_role(user.role_set, Role.SUPER_ADMIN)
    user.senha_hash = bcrypt.generate_password_hash(password).decode("utf-8")
    user.ativo = True
    commit()
    print(f"Updated SuperAdmin: {email} / {password}")
    return user
