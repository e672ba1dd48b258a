"""Vínculos usuário x projeto: administradores, funcionários, doadores e voluntários.

As tabelas usam as colunas id_user / id_project (nomes em inglês no banco).
"""

from pawhub_api.extensions import db


class Administrator(db.Model):
    __tablename__ = "administrators"

    id_user = db.Column(db.Uuid, db.ForeignKey("usuarios.id", ondelete="CASCADE"), primary_key=True)
    id_project = db.Column(db.Uuid, db.ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True)
    observacao = db.Column(db.Text)

    def __repr__(self) -> str:
        return f"<Administrator user={self.id_user} project={self.id_project}>"


class Employee(db.Model):
    __tablename__ = "employees"

    id_user = db.Column(db.Uuid, db.ForeignKey("usuarios.id", ondelete="CASCADE"), primary_key=True)
    id_project = db.Column(db.Uuid, db.ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True)
    privilegios = db.Column(db.Boolean, nullable=False, default=False)
    funcao = db.Column(db.String)
    observacao = db.Column(db.Text)

    def __repr__(self) -> str:
        return f"<Employee user={self.id_user} project={self.id_project} privilegios={self.privilegios}>"


class Donor(db.Model):
    __tablename__ = "donors"

    id_user = db.Column(db.Uuid, db.ForeignKey("usuarios.id", ondelete="CASCADE"), primary_key=True)
    id_project = db.Column(db.Uuid, db.ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True)
    frequencia = db.Column(db.String(20))
    dt_lembrete = db.Column(db.Date)
    dt_ultima_doacao = db.Column(db.Date)
    dt_proxima_doacao = db.Column(db.Date)
    observacao = db.Column(db.Text)

    def __repr__(self) -> str:
        return f"<Donor user={self.id_user} project={self.id_project}>"


class Volunteer(db.Model):
    __tablename__ = "volunteers"

    id_user = db.Column(db.Uuid, db.ForeignKey("usuarios.id", ondelete="CASCADE"), primary_key=True)
    id_project = db.Column(db.Uuid, db.ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True)
    servico = db.Column(db.String)
    frequencia = db.Column(db.String(20))
    # última e próxima participação
    lt_data = db.Column(db.Date)
    px_data = db.Column(db.Date)

    def __repr__(self) -> str:
        return f"<Volunteer user={self.id_user} project={self.id_project}>"
