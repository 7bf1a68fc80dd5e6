import sys
from typing import Optional

import uvicorn
from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings
from starlette.concurrency import run_in_threadpool
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.types import ASGIApp

from .config import ServerSettings, load_server_settings, load_solve_options
from .logging_config import setup_logging
from .lp.solve import solve_request, solve_request_model
from .schemas import SimplexInput, SolveOptions

app = FastMCP("Simplex Calculator")


@app.tool()
def solve(request: SimplexInput, options: SolveOptions | None = None) -> dict:
    "Solve max/min c.x s.t. A x <= b, x >= 0 and report shadow prices and bound variations."
    opts = options or load_solve_options()
    return solve_request(request, opts).model_dump()


@app.tool()
def rhs_ranging(request: SimplexInput, options: SolveOptions | None = None) -> dict:
    "Return, per constraint, the bound interval over which the optimal basis is unchanged."
    opts = options or load_solve_options()
    solution = solve_request_model(request, opts)
    return {
        "status": int(solution.status),
        "message": solution.message,
        "ranges": [r.model_dump(mode="json") for r in solution.rhs_ranges],
    }


@app.custom_route("/solve", methods=["POST"])
async def solve_endpoint(request: Request) -> JSONResponse:
    try:
        payload = await request.json()
    except ValueError:
        # covers bodies that are not JSON and bodies that are not UTF-8
        payload = None
    if not isinstance(payload, dict):
        payload = {}
    output = await run_in_threadpool(solve_request, payload, load_solve_options())
    return JSONResponse(output.model_dump())


def create_http_app(settings: Optional[ServerSettings] = None) -> ASGIApp:
    """Streamable-HTTP MCP app plus the /solve route, behind CORS for the browser form."""
    settings = settings or load_server_settings()
    app.settings.streamable_http_path = "/mcp"
    app.settings.transport_security = TransportSecuritySettings(
        enable_dns_rebinding_protection=False,
        allowed_hosts=["*"],
        allowed_origins=["*"],
    )
    return CORSMiddleware(
        app.streamable_http_app(),
        allow_origins=settings.allowed_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )


def main() -> None:
    settings = load_server_settings()
    setup_logging(settings.log_level, settings.log_file)

    if settings.transport == "stdio" or "--stdio" in sys.argv:
        app.run(transport="stdio")
    else:
        uvicorn.run(
            create_http_app(settings),
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level.lower(),
        )


if __name__ == "__main__":
    main()
