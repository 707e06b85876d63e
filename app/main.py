"""FastAPI application entrypoint."""

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI

from app.adapters.inbound.http.routes import router
from app.infrastructure.config.settings import settings

# Load environment variables from .env file
load_dotenv()

app = FastAPI(
    title="Lead Pipeline",
    description="Deterministic lead status transition engine for outreach sequences",
    version="0.1.0",
)

app.include_router(router)


def run() -> None:
    """Serve the API with uvicorn."""
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    run()
