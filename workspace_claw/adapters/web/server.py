"""FastAPI application and startup."""

import sys

import uvicorn
from fastapi import FastAPI

from workspace_claw.adapters.web.action_routes import action_router
from workspace_claw.config import CONFIG, __version__

app = FastAPI(title="Workspace Claw", version=__version__)
app.include_router(action_router)


@app.get("/health")
async def health():
    return {
        "status": "ok",
        "workspace_root": CONFIG["workspace_root"],
        "require_manual_approval": CONFIG["require_manual_approval"],
    }


@app.on_event("startup")
async def startup_event():
    print("Workspace Claw server starting", file=sys.stderr)
    print(f"Workspace: {CONFIG['workspace_root']}", file=sys.stderr)
    print(
        f"Manual approval: {'required' if CONFIG['require_manual_approval'] else 'off'}",
        file=sys.stderr,
    )


def main():
    uvicorn.run(app, host=CONFIG["host"], port=CONFIG["port"], log_level="info")
