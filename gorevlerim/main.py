import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.applications import Starlette
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.routing import Mount

from gorevlerim.auth import ApiKeyMiddleware, router as auth_router
from gorevlerim.config import get_settings
from gorevlerim.exceptions import TODO_ERRORS
from gorevlerim.mcp_server import mcp
from gorevlerim.models.common import ErrorResponse
from gorevlerim.routers.tasks import router as tasks_router


# --- Exception handlers ---

async def todo_error_handler(request: Request, exc: Exception):
    return JSONResponse(status_code=400, content=ErrorResponse(error=str(exc)).model_dump())


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return JSONResponse(status_code=400, content=ErrorResponse(error=errors).model_dump())


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail.capitalize() if isinstance(exc.detail, str) else exc.detail},
        headers=exc.headers,
    )


async def task_api_http_error_handler(request: Request, exc: StarletteHTTPException):
    # any method/path pair without a handler is "not found" on the task API
    if exc.status_code == 405:
        return JSONResponse(status_code=404, content=ErrorResponse(error="Not found").model_dump())
    return await http_error_handler(request, exc)


def _install_error_handlers(app: FastAPI) -> None:
    for error in TODO_ERRORS:
        app.add_exception_handler(error, todo_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)


# --- FastAPI apps ---

api = FastAPI(title="Gorevlerim", version="0.1.0")
api.add_middleware(ApiKeyMiddleware)
api.include_router(tasks_router)
_install_error_handlers(api)
api.add_exception_handler(StarletteHTTPException, task_api_http_error_handler)

auth_api = FastAPI(title="Gorevlerim OAuth", version="0.1.0")
auth_api.include_router(auth_router)
_install_error_handlers(auth_api)


# --- Starlette root app ---

mcp_app = mcp.http_app(path="/", stateless_http=True)

app = Starlette(
    middleware=[
        Middleware(
            CORSMiddleware,
            allow_origins=get_settings().cors_origins,
            allow_methods=["*"],
            allow_headers=["authorization", "x-client-info", "apikey", "content-type", "x-api-key"],
        ),
    ],
    routes=[
        Mount("/mcp", app=mcp_app),
        Mount("/todo-api", app=api),
        Mount("/", app=auth_api),
    ],
    lifespan=mcp_app.lifespan,
)


def run():
    settings = get_settings()
    uvicorn.run(
        "gorevlerim.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
