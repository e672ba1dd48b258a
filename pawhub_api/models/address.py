import uuid

from pawhub_api.extensions import db


class Address(db.Model):
    __tablename__ = "address"

    id = db.Column(db.Uuid, primary_key=True, default=uuid.uuid4)
    cep = db.Column(db.String(8), nullable=False)
    estado = db.Column(db.String(2), nullable=False)
    cidade = db.Column(db.String, nullable=False)
    bairro = db.Column(db.String, nullable=False)
    endereco = db.Column(db.String)
    numero = db.Column(db.String)
    complemento = db.Column(db.String)

    def __repr__(self) -> str:
        return f"<Address id={self.id} cep={self.cep} cidade={self.cidade}>"
