import os
from typing import List, Literal, Mapping, Optional

from pydantic import BaseModel, Field

from .schemas import SolveOptions

Transport = Literal["stdio", "http"]

_SOLVE_ENV = {
    "tol": "SIMPLEX_TOL",
    "max_iters": "SIMPLEX_MAX_ITERS",
    "pivot_rule": "SIMPLEX_PIVOT_RULE",
    "degenerate_streak": "SIMPLEX_DEGENERATE_STREAK",
}


class ServerSettings(BaseModel):
    transport: Transport = "stdio"
    host: str = "0.0.0.0"
    # the form posts to http://127.0.0.1:8000/solve
    port: int = 8000
    log_level: str = "INFO"
    log_file: Optional[str] = None
    # origins allowed to call /solve from a browser
    allowed_origins: List[str] = Field(default_factory=lambda: ["*"])


def load_solve_options(environ: Optional[Mapping[str, str]] = None) -> SolveOptions:
    env = os.environ if environ is None else environ
    values = {field: env[key] for field, key in _SOLVE_ENV.items() if key in env}
    return SolveOptions.model_validate(values)


def load_server_settings(environ: Optional[Mapping[str, str]] = None) -> ServerSettings:
    env = os.environ if environ is None else environ
    values = {}
    if "MCP_TRANSPORT" in env:
        values["transport"] = env["MCP_TRANSPORT"]
    if "PORT" in env:
        values["port"] = env["PORT"]
    if "SIMPLEX_LOG_LEVEL" in env:
        values["log_level"] = env["SIMPLEX_LOG_LEVEL"].upper()
    if "SIMPLEX_LOG_FILE" in env:
        values["log_file"] = env["SIMPLEX_LOG_FILE"]
    if "SIMPLEX_CORS_ORIGINS" in env:
        values["allowed_origins"] = [o.strip() for o in env["SIMPLEX_CORS_ORIGINS"].split(",") if o.strip()]
    return ServerSettings.model_validate(values)
