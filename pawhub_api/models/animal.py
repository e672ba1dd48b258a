import uuid
from datetime import date

from pawhub_api.extensions import db


class Animal(db.Model):
    __tablename__ = "animais"

    id = db.Column(db.Uuid, primary_key=True, default=uuid.uuid4)
    id_projeto = db.Column(db.Uuid, db.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    nome = db.Column(db.String, nullable=False)
    especie = db.Column(db.String)
    raca = db.Column(db.String)
    status = db.Column(db.String(30), nullable=False, default="Disponivel")
    entrada = db.Column(db.Date, nullable=False, default=date.today)
    observacao = db.Column(db.Text)

    def __repr__(self) -> str:
        return f"<Animal id={self.id} nome={self.nome} status={self.status}>"
