from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager
from flask_bcrypt import Bcrypt
from flask_cors import CORS

db = SQLAlchemy()
jwt = JWTManager()
bcrypt = Bcrypt()

API_PREFIX = "/api/v1"
# PATCH cobre as edições parciais de usuários, projetos, vínculos e doações
CORS_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS")
CORS_HEADERS = ("Content-Type", "Authorization")


def init_cors(app):
    """Liga o CORS apenas nas rotas da API, com origens vindas de Config."""
    CORS(
        app,
        resources={f"{API_PREFIX}/*": {"origins": app.config.get("CORS_ORIGINS") or []}},
        methods=list(CORS_METHODS),
        allow_headers=list(CORS_HEADERS),
        max_age=app.config.get("CORS_MAX_AGE"),
        supports_credentials=False,
    )
