# app.py
import logging
import os
from pathlib import Path
from dotenv import load_dotenv

# Carrega .env antes de importar config/extensões
ENV_PATH = Path(__file__).resolve().with_name(".env")
load_dotenv(dotenv_path=ENV_PATH)

from flask import Flask, jsonify, request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from pawhub_api.extensions import API_PREFIX, db, init_cors, bcrypt, jwt
from pawhub_api.utils.errors import register_error_handlers


def create_app(config_object=None):
    app = Flask(__name__)
    if config_object is None:
        from pawhub_api.config import Config

        config_object = Config
    app.config.from_object(config_object)
    app.logger.setLevel(getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO))

    db.init_app(app)
    bcrypt.init_app(app)
    jwt.init_app(app)
    init_cors(app)

    from pawhub_api import models  # noqa: F401  registra as tabelas no metadata
    from pawhub_api.auth.middleware import register_jwt_handlers

    register_jwt_handlers(jwt)
    register_error_handlers(app)

    # Garantir resposta ao preflight (OPTIONS) globalmente
    @app.before_request
    def _handle_cors_preflight():
        if request.method == "OPTIONS":
            return "", 204

    # Blueprints
    from pawhub_api.auth.routes import bp as auth_bp
    from pawhub_api.routes.users import bp as users_bp
    from pawhub_api.routes.projects import bp as projects_bp
    from pawhub_api.routes.administrators import bp as administrators_bp
    from pawhub_api.routes.employees import bp as employees_bp
    from pawhub_api.routes.donors import bp as donors_bp
    from pawhub_api.routes.volunteers import bp as volunteers_bp
    from pawhub_api.routes.animals import bp as animals_bp
    from pawhub_api.routes.donations import bp as donations_bp
    from pawhub_api.routes.adoptions import bp as adoptions_bp

    for blueprint, path in (
        (auth_bp, "auth"),
        (users_bp, "users"),
        (projects_bp, "projects"),
        (administrators_bp, "administrators"),
        (employees_bp, "employees"),
        (donors_bp, "donors"),
        (volunteers_bp, "volunteers"),
        (animals_bp, "animals"),
        (donations_bp, "donations"),
        (adoptions_bp, "adoptions"),
    ):
        app.register_blueprint(blueprint, url_prefix=f"{API_PREFIX}/{path}")

    # Health
    @app.get(f"{API_PREFIX}/health")
    def health():
        # Verifica conectividade com o banco
        try:
            db.session.execute(text("SELECT 1"))
            db_ok = True
            detail = None
        except SQLAlchemyError as e:
            db.session.rollback()
            app.logger.warning("Health check failed: %s", e)
            db_ok = False
            detail = str(e)

        payload = {
            "status": "ok" if db_ok else "error",
            "db": "ok" if db_ok else "error",
        }
        if detail and not db_ok:
            payload["detail"] = detail

        return jsonify(payload), (200 if db_ok else 500)

    # seed opcional (DEV/TEST)
    @app.cli.command("seed_admin")
    def seed_admin_cmd():
        from pawhub_api.scripts.seed_admin import run as seed_admin_run
        seed_admin_run()

    @app.cli.command("create_tables")
    def create_tables_cmd():
        db.create_all()
        app.logger.info("Tables created")

    return app


if __name__ == "__main__":
    app = create_app()
    with app.app_context():
        # opcional: criar tabelas se não usa migrações
        db.create_all()
    app.run(host="0.0.0.0", port=int(os.environ.get("PORT", 5000)))
