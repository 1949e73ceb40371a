"""
Environment configuration for the ingestion service.

Everything is read from environment variables; ``create_app`` lets callers
override any key with a plain mapping.
"""
import os
from dataclasses import dataclass

from sqlalchemy.engine import URL


@dataclass(frozen=True)
class BackendIdentity:
    name: str
    route_prefix: str
    default_port: int

    @property
    def api_path(self):
        return f"/api/{self.route_prefix}"


BACKENDS = {
    "a": BackendIdentity(name="backend-a", route_prefix="a", default_port=8080),
    "b": BackendIdentity(name="backend-b", route_prefix="b", default_port=3000),
}

DEFAULT_MAX_CONTENT_LENGTH = 10 * 1024 * 1024  # 10 MB


def _as_bool(value, default=False):
    if value is None:
        return default
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def resolve_identity(backend=None, name=None):
    """Pick the identity preset for ``backend`` ("a" or "b"), optionally renamed."""
    key = (backend or "a").strip().lower()
    if key.startswith("backend-"):
        key = key[len("backend-"):]
    if key not in BACKENDS:
        raise ValueError(f"Unknown backend {backend!r}, expected one of: {', '.join(sorted(BACKENDS))}")
    identity = BACKENDS[key]
    if name:
        identity = BackendIdentity(name=name, route_prefix=identity.route_prefix,
                                   default_port=identity.default_port)
    return identity


def build_database_url(env):
    """DATABASE_URL wins; otherwise assemble a psycopg2 URL from the DB_* parts."""
    if env.get("DATABASE_URL"):
        return env["DATABASE_URL"]
    return URL.create(
        "postgresql+psycopg2",
        username=env.get("DB_USER"),
        password=env.get("DB_PASSWORD"),
        host=env.get("DB_HOST") or "localhost",
        port=int(env.get("DB_PORT") or 5432),
        database=env.get("DB_NAME"),
    )


def build_connect_args(env):
    """psycopg2 options for the DB_* style connection; a DATABASE_URL carries its own."""
    if env.get("DATABASE_URL"):
        return {}
    # sslmode=require encrypts without verifying the server certificate
    args = {"sslmode": "require" if env.get("DB_SSL") == "require" else "disable"}
    if env.get("DB_CONNECT_TIMEOUT"):
        args["connect_timeout"] = int(env["DB_CONNECT_TIMEOUT"])
    return args


def load_config(environ=None, **overrides):
    env = dict(os.environ if environ is None else environ)
    env.update({k: v for k, v in overrides.items() if v is not None})
    identity = resolve_identity(env.get("BACKEND"), env.get("BACKEND_NAME"))
    return {
        "BACKEND_IDENTITY": identity,
        "PORT": int(env.get("PORT") or identity.default_port),
        "DATABASE_URL": build_database_url(env),
        "DB_CONNECT_ARGS": build_connect_args(env),
        "DB_POOL_SIZE": int(env.get("DB_POOL_SIZE") or 10),
        "DB_CREATE_SCHEMA": _as_bool(env.get("DB_CREATE_SCHEMA"), default=True),
        "LOG_LEVEL": env.get("LOG_LEVEL", "INFO").upper(),
        "LOG_DIR": env.get("LOG_DIR"),
        "MAX_CONTENT_LENGTH": int(env.get("MAX_CONTENT_LENGTH") or DEFAULT_MAX_CONTENT_LENGTH),
    }
