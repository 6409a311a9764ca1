import logging
from contextlib import asynccontextmanager
from typing import Callable

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tripwhiz_support.api.routes import router as api_router
from tripwhiz_support.config import public_settings, settings, setup_logging
from tripwhiz_support.session import SupportSession

logger = setup_logging()


def create_app(session_factory: Callable[[], SupportSession] = SupportSession.from_settings) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        session = session_factory()
        session.init()
        app.state.session = session
        try:
            yield
        finally:
            session.dispose()

    app = FastAPI(title="TripWhiz Support Bot", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error", extra={"path": request.url.path})
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    app.include_router(api_router)
    return app


logger.info("Application starting")
logger.info("Loaded settings: %s", public_settings())

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.app_host, port=settings.app_port)
