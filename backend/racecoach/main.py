import logging

from fastapi import FastAPI

from .core.config import get_settings
from .routers import user_program

logging.basicConfig(level=get_settings().log_level.upper())

app = FastAPI(
    title="Race Prep Coach",
    version="0.1.0",
)

app.include_router(user_program.router)


@app.get("/health", tags=["health"])
def healthcheck() -> dict[str, str]:
    return {"status": "ok"}
