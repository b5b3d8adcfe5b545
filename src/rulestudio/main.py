import logging

from fastapi import FastAPI

from rulestudio import __version__
from rulestudio.api.errors import rule_studio_error_handler
from rulestudio.api.remote_config import router as remote_config_router
from rulestudio.api.rules import router as rules_router
from rulestudio.api.simulations import router as simulations_router
from rulestudio.core.config import config
from rulestudio.core.errors import RuleStudioError

# --- Application Setup ---

logging.basicConfig(
    level=getattr(logging, config.logging.level.upper(), logging.INFO),
    format=config.logging.format,
    filename=config.logging.file_path,
)

app = FastAPI(
    title="Rule Studio",
    description="Lint rule catalog and impact simulation.",
    version=__version__,
)

app.add_exception_handler(RuleStudioError, rule_studio_error_handler)

# --- Include Routers ---

app.include_router(rules_router, prefix="/api/v1", tags=["Rules"])
app.include_router(simulations_router, prefix="/api/v1", tags=["Simulations"])
app.include_router(remote_config_router, prefix="/api/v1", tags=["Remote Config"])

# --- Root Endpoint ---


@app.get("/", tags=["Health Check"])
async def read_root():
    """A simple health check endpoint to confirm the service is running."""
    return {"status": "ok", "message": "Rule Studio is running."}
