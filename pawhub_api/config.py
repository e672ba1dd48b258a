import os
from urllib.parse import urlparse, parse_qsl, urlencode, urlunparse
from datetime import timedelta


def _parse_duration(s: str) -> timedelta:
    if not s:
        return timedelta(hours=24)
    s = s.strip().lower()
    if s.endswith("d"):
        return timedelta(days=int(s[:-1] or 1))
    if s.endswith("h"):
        return timedelta(hours=int(s[:-1] or 24))
    if s.endswith("m"):
        return timedelta(minutes=int(s[:-1] or 60))
    return timedelta(seconds=int(s))


def _normalize_database_uri(uri: str) -> str:
    # Corrige URLs antigas 'postgres://'
    if uri.startswith("postgres://"):
        uri = uri.replace("postgres://", "postgresql+psycopg2://", 1)

    parsed = urlparse(uri)
    host = parsed.hostname or ""
    if host.endswith("supabase.co") or host.endswith("supabase.com"):
        q = dict(parse_qsl(parsed.query, keep_blank_values=True))
        # Garante SSL por padrão no Supabase
        q.setdefault("sslmode", "require")
        uri = urlunparse((
            parsed.scheme,
            parsed.netloc,
            parsed.path,
            parsed.params,
            urlencode(q),
            parsed.fragment,
        ))
    return uri


def _engine_options(uri: str) -> dict:
    # SQLite (testes) usa StaticPool/SingletonThreadPool: não aceita pool_size
    if uri.startswith("sqlite"):
        return {}
    return {
        "pool_pre_ping": True,
        "pool_recycle": int(os.getenv("DB_POOL_RECYCLE", "1800")),
        "pool_size": int(os.getenv("DB_POOL_SIZE", "5")),
        "max_overflow": int(os.getenv("DB_MAX_OVERFLOW", "10")),
    }


class Config:
    # DB
    # Prefer DATABASE_URL (Supabase padrão), caindo para SQLALCHEMY_DATABASE_URI
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL") or os.getenv("SQLALCHEMY_DATABASE_URI")
    if not SQLALCHEMY_DATABASE_URI:
        raise RuntimeError("DATABASE_URL/SQLALCHEMY_DATABASE_URI não definida no ambiente/.env")
    SQLALCHEMY_DATABASE_URI = _normalize_database_uri(SQLALCHEMY_DATABASE_URI)

    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = os.getenv("SQLALCHEMY_ECHO", "0") == "1"
    SQLALCHEMY_ENGINE_OPTIONS = _engine_options(SQLALCHEMY_DATABASE_URI)

    # JWT emitido pela própria API (login com email/senha)
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY") or os.getenv("JWT_SECRET", "change-me")
    JWT_ACCESS_TOKEN_EXPIRES = _parse_duration(os.getenv("JWT_EXPIRES_IN", "24h"))

    BCRYPT_LOG_ROUNDS = int(os.getenv("BCRYPT_LOG_ROUNDS", "12"))

    # Regras de domínio
    MAX_SUPER_ADMINS = int(os.getenv("MAX_SUPER_ADMINS", "2"))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # CORS
    # Permitir apenas origens conhecidas por padrão; pode sobrescrever via CORS_ORIGINS
    _cors_from_env = [o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()]
    CORS_ORIGINS = _cors_from_env or [
        "http://localhost:5173",
        "http://localhost:3000",
    ]
    CORS_MAX_AGE = int(os.getenv("CORS_MAX_AGE", "600"))
