import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Index, text
from sqlalchemy.dialects.postgresql import JSONB

from pawhub_api.extensions import db
from pawhub_api.domain.roles import RoleSet, parse_roles, to_tokens
from pawhub_api.domain.donations import ANONYMOUS_CPF, is_anonymous_donor

# JSONB no Postgres, JSON genérico no SQLite dos testes
RolesType = JSON().with_variant(JSONB(), "postgresql")


def _utcnow():
    return datetime.now(timezone.utc)


class User(db.Model):
    __tablename__ = "usuarios"
    __table_args__ = (
        # CPF é único, exceto o sentinela usado pelos doadores anônimos
        Index(
            "uq_usuarios_cpf",
            "cpf",
            unique=True,
            postgresql_where=text(f"cpf <> '{ANONYMOUS_CPF}'"),
            sqlite_where=text(f"cpf <> '{ANONYMOUS_CPF}'"),
        ),
    )

    id = db.Column(db.Uuid, primary_key=True, default=uuid.uuid4)
    nome = db.Column(db.String, nullable=False)
    email = db.Column(db.String, nullable=False, unique=True, index=True)
    cpf = db.Column(db.String(11), nullable=True)
    telefone = db.Column(db.String)
    foto_url = db.Column(db.String)
    ativo = db.Column(db.Boolean, nullable=False, default=True)
    roles = db.Column(RolesType, nullable=False, default=list)
    senha_hash = db.Column(db.String, nullable=True)

    endereco_id = db.Column(db.Uuid, db.ForeignKey("address.id"), nullable=True)
    endereco = db.relationship("Address", lazy="joined")

    criado_em = db.Column(db.DateTime(timezone=True), default=_utcnow, nullable=True)

    @property
    def role_set(self) -> RoleSet:
        return parse_roles(self.roles)

    @role_set.setter
    def role_set(self, value: RoleSet) -> None:
        # lista nova a cada atribuição: o ORM só detecta troca, não mutação
        self.roles = to_tokens(value)

    @property
    def is_anonymous_donor(self) -> bool:
        return is_anonymous_donor(self.nome, self.email, self.cpf)

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email} roles={self.roles}>"
