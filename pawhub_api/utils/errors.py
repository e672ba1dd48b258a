from flask import jsonify
from werkzeug.exceptions import HTTPException


class DomainError(Exception):
    """Erro de domínio com status HTTP associado.

    Os serviços levantam subclasses; as rotas não tratam nada, quem converte
    para JSON é o handler registrado em register_error_handlers.
    """

    status_code = 400
    kind = "DomainError"

    def __init__(self, message: str, detail=None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class NotFound(DomainError):
    status_code = 404
    kind = "NotFound"


class Forbidden(DomainError):
    status_code = 403
    kind = "Forbidden"


class InvalidInput(DomainError):
    status_code = 400
    kind = "InvalidInput"


class Conflict(DomainError):
    status_code = 409
    kind = "Conflict"


class Unauthorized(DomainError):
    status_code = 401
    kind = "Unauthorized"


class UpstreamFailure(DomainError):
    status_code = 502
    kind = "UpstreamFailure"


def register_error_handlers(app):
    """Registra handlers globais de erro para retornar JSON padronizado."""

    @app.errorhandler(DomainError)
    def domain_error(e: DomainError):
        if isinstance(e, UpstreamFailure):
            app.logger.error("Upstream failure: %s (%s)", e.message, e.detail)
        payload = {"error": e.message, "kind": e.kind}
        if e.detail and not isinstance(e, UpstreamFailure):
            payload["detail"] = e.detail
        return jsonify(payload), e.status_code

    @app.errorhandler(400)
    def bad_request(_):
        return jsonify({"error": "Dados inválidos."}), 400

    @app.errorhandler(401)
    def unauthorized(_):
        return jsonify({"error": "Unauthorized"}), 401

    @app.errorhandler(403)
    def forbidden(_):
        return jsonify({"error": "Forbidden"}), 403

    @app.errorhandler(404)
    def not_found(_):
        return jsonify({"error": "Not Found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(_):
        return jsonify({"error": "Method Not Allowed"}), 405

    @app.errorhandler(500)
    def internal(_):
        return jsonify({"error": "Internal Server Error"}), 500

    @app.errorhandler(Exception)
    def unhandled_exception(e):
        # se for HTTPException (ex.: abort(404)), deixa cair no handler já definido
        if isinstance(e, HTTPException):
            return jsonify({"error": e.description}), e.code

        # loga no console para debug (não expõe stack trace no cliente)
        app.logger.exception("Unhandled Exception: %s", e)

        return jsonify({"error": "Internal Server Error"}), 500
