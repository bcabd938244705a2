import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.routes import router
from core.config import Settings, configure_logging, get_settings, load_env
from core.errors import ModdoError

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    if settings is None:
        load_env()
        settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Moddo API")
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ModdoError)
    async def moddo_error_handler(request: Request, exc: ModdoError):
        return JSONResponse({"success": False, "error": exc.to_dict()}, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            {
                "success": False,
                "error": {
                    "code": "INVALID_REQUEST",
                    "message": "Request body or parameters are malformed",
                    "details": jsonable_errors(exc),
                },
            },
            status_code=400,
        )

    app.include_router(router)

    # Uploaded STL files (LocalFileStorage writes under files_dir)
    app.mount(settings.files_base_url, StaticFiles(directory=settings.files_dir, check_dir=False), name="files")

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


def jsonable_errors(exc: RequestValidationError):
    return [{"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in exc.errors()]


app = create_app()
