import uuid
from datetime import date, datetime, timezone

from pawhub_api.extensions import db


class Adoption(db.Model):
    __tablename__ = "adocoes"

    id = db.Column(db.Uuid, primary_key=True, default=uuid.uuid4)
    id_projeto = db.Column(db.Uuid, db.ForeignKey("projects.id"), nullable=False, index=True)
    id_adotante = db.Column(db.Uuid, db.ForeignKey("usuarios.id"), nullable=False, index=True)
    id_animal = db.Column(db.Uuid, db.ForeignKey("animais.id"), nullable=False, index=True)
    dt_adocao = db.Column(db.Date, nullable=False, default=date.today)
    # reescrita a cada AdoptionUpdate criada
    lt_atualizacao = db.Column(db.Date)
    observacao = db.Column(db.Text)

    updates = db.relationship(
        "AdoptionUpdate",
        backref="adoption",
        lazy="dynamic",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Adoption id={self.id} animal={self.id_animal} adotante={self.id_adotante}>"


class AdoptionUpdate(db.Model):
    __tablename__ = "atualizacoes_adocao"

    id = db.Column(db.Uuid, primary_key=True, default=uuid.uuid4)
    id_adocao = db.Column(
        db.Uuid,
        db.ForeignKey("adocoes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    id_responsavel = db.Column(db.Uuid, db.ForeignKey("usuarios.id"), nullable=False)
    status = db.Column(db.String(30), nullable=False)
    dt_proxima = db.Column(db.Date)
    observacao = db.Column(db.Text)
    criado_em = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)

    def __repr__(self) -> str:
        return f"<AdoptionUpdate id={self.id} status={self.status} adocao={self.id_adocao}>"
