import uuid
from datetime import datetime, timezone

from pawhub_api.extensions import db


class Project(db.Model):
    __tablename__ = "projects"

    id = db.Column(db.Uuid, primary_key=True, default=uuid.uuid4)
    nome = db.Column(db.String, nullable=False)
    telefone = db.Column(db.String)
    email = db.Column(db.String)
    instagram = db.Column(db.String)

    endereco_id = db.Column(db.Uuid, db.ForeignKey("address.id"), nullable=True)
    endereco = db.relationship("Address", lazy="joined")

    criado_em = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    def __repr__(self) -> str:
        return f"<Project id={self.id} nome={self.nome}>"
