"""FastAPI application entry point."""
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from app.logging_config import configure_logging
from app.routers import health, plans


configure_logging()

app = FastAPI(title="Race Plan Builder API")
templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))


@app.get("/", response_class=HTMLResponse, tags=["dashboard"])
async def dashboard(request: Request) -> HTMLResponse:
    """Landing page listing the planner endpoints."""
    return templates.TemplateResponse(request, "index.html", {"routes": plans.router.routes})


@app.get("/health", tags=["system"])
async def health_check() -> dict[str, str]:
    """Simple health probe for liveness checks."""
    return {"status": "ok"}


# Include routers
app.include_router(health.router)
app.include_router(plans.router)
