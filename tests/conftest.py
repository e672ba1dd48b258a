# tests/conftest.py
import os
import random
import string
import uuid

# Configure env BEFORE importing app/config
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-with-at-least-32-bytes")

import pytest

from pawhub_api.app import create_app
from pawhub_api.auth.tokens import issue_access_token
from pawhub_api.config import Config
from pawhub_api.extensions import bcrypt, db
from pawhub_api.models import Employee, Project, User

PASSWORD = "1234567890"  # mesma senha para todos os usuários de teste


class ConfigForTests(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    BCRYPT_LOG_ROUNDS = 4
    JWT_SECRET_KEY = "test-secret-key-with-at-least-32-bytes"
    MAX_SUPER_ADMINS = 2
    CORS_ORIGINS = ["http://localhost:5173"]


@pytest.fixture
def app():
    app = create_app(ConfigForTests)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


# ---- Utils simples pra gerar dados ----

def rand_name(prefix="QA"):
    suffix = "".join(random.choice(string.ascii_uppercase) for _ in range(5))
    return f"{prefix} {suffix}"


def rand_email():
    return f"qa_{uuid.uuid4().hex[:10]}@example.com"


def make_user(*roles, email=None, name=None, password=PASSWORD, **extra) -> User:
    user = User(
        id=uuid.uuid4(),
        nome=name or rand_name(),
        email=email or rand_email(),
        ativo=extra.pop("ativo", True),
        senha_hash=bcrypt.generate_password_hash(password).decode("utf-8") if password else None,
        **extra,
    )
    user.roles = list(roles) or ["Adotante"]
    db.session.add(user)
    db.session.commit()
    return user


def make_project(name=None) -> Project:
    project = Project(id=uuid.uuid4(), nome=name or rand_name("Abrigo"))
    db.session.add(project)
    db.session.commit()
    return project


def make_employee(user: User, project: Project, privileged=False) -> Employee:
    employee = Employee(id_user=user.id, id_project=project.id, privilegios=privileged)
    db.session.add(employee)
    db.session.commit()
    return employee


def headers_for(user: User) -> dict:
    return {"Authorization": f"Bearer {issue_access_token(user)}"}


# ---- Fixtures por papel ----

@pytest.fixture
def super_admin(app):
    return make_user("SuperAdmin", name="Root")


@pytest.fixture
def admin(app):
    return make_user("Administrador")


@pytest.fixture
def project(app):
    return make_project()


@pytest.fixture
def sa_headers(super_admin):
    return headers_for(super_admin)


@pytest.fixture
def admin_headers(admin):
    return headers_for(admin)
