import uuid
from datetime import date

from pawhub_api.extensions import db


class Donation(db.Model):
    __tablename__ = "doacoes"
    __table_args__ = (
        # exige que (id_user, id_project) esteja em donors
        db.ForeignKeyConstraint(
            ["id_user", "id_project"],
            ["donors.id_user", "donors.id_project"],
            name="donations_id_user_id_project_fkey",
        ),
    )

    id = db.Column(db.Uuid, primary_key=True, default=uuid.uuid4)
    id_user = db.Column(db.Uuid, nullable=False, index=True)
    id_project = db.Column(db.Uuid, nullable=False, index=True)

    # Tokens em caixa alta (FINANCEIRA, ITENS, OUTRO / PIX, DINHEIRO, TRANSFERENCIA, OUTRO)
    tp_ajuda = db.Column(db.String(30))
    tp_pagamento = db.Column(db.String(30))
    valor = db.Column(db.Numeric(12, 2))
    itens = db.Column(db.Text)

    data = db.Column(db.Date, default=date.today)
    observacao = db.Column(db.Text)

    def __repr__(self) -> str:
        return f"<Donation id={self.id} tp_ajuda={self.tp_ajuda} valor={self.valor}>"
