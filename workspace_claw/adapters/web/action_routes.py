"""File action API routes."""

from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from workspace_claw.adapters.filesystem.executor import FileActionExecutor
from workspace_claw.config import CONFIG
from workspace_claw.domain.action_parser import (
    format_action_list,
    has_action_markers,
    parse_actions,
    strip_actions,
)
from workspace_claw.domain.errors import (
    ActionError,
    ActionNotFound,
    PathOutsideWorkspace,
    WorkspaceError,
)
from workspace_claw.domain.models import (
    ActionResult,
    ParseDiagnostic,
    action_from_dict,
    action_label,
    action_to_dict,
)
from workspace_claw.domain.prompts import build_action_prompt
from workspace_claw.domain.runner import ActionRunner

action_router = APIRouter(prefix="/actions", tags=["Actions"])

executor = FileActionExecutor()


class ActionModel(BaseModel):
    type: str
    description: str = ""
    path: Optional[str] = None
    content: Optional[str] = None
    source_path: Optional[str] = None
    destination_path: Optional[str] = None


class DiagnosticModel(BaseModel):
    line_no: int
    line: str
    reason: str


class ParseRequest(BaseModel):
    text: str


class ParseResponse(BaseModel):
    actions: List[ActionModel]
    has_actions: bool
    prose: str
    diagnostics: Optional[List[DiagnosticModel]] = None


class ExecuteRequest(BaseModel):
    action: ActionModel
    approved: bool = False


class ExecuteResponse(BaseModel):
    success: bool
    message: str
    executed: bool = True


class ApplyRequest(BaseModel):
    text: str
    approved: bool = False


class ResultModel(BaseModel):
    action: ActionModel
    success: bool
    skipped: bool
    message: str
    error: Optional[str] = None


class ApplyResponse(BaseModel):
    executed: bool
    actions: List[ActionModel]
    preview: str
    results: List[ResultModel] = []
    ok: Optional[bool] = None
    summary: Optional[str] = None


class DirectoryListing(BaseModel):
    path: str
    files: List[str]
    directories: List[str]


class PromptRequest(BaseModel):
    request: str
    context: str = ""
    files: List[str] = []
    include_structure: bool = True


class PromptResponse(BaseModel):
    prompt: str


def _to_result_model(result: ActionResult) -> ResultModel:
    return ResultModel(
        action=ActionModel(**action_to_dict(result.action)),
        success=result.success,
        skipped=result.skipped,
        message=result.message,
        error=result.error,
    )


def _raise_http(e: ActionError):
    if isinstance(e, ActionNotFound):
        raise HTTPException(status_code=404, detail=str(e))
    if isinstance(e, PathOutsideWorkspace):
        raise HTTPException(status_code=400, detail=str(e))
    if isinstance(e, WorkspaceError):
        raise HTTPException(status_code=503, detail=str(e))
    raise HTTPException(status_code=500, detail=str(e))


@action_router.post("/parse", response_model=ParseResponse)
async def parse(req: ParseRequest):
    diagnostics: Optional[List[ParseDiagnostic]] = (
        [] if CONFIG.get("report_parse_diagnostics", False) else None
    )
    actions = parse_actions(req.text, diagnostics)
    return ParseResponse(
        actions=[ActionModel(**action_to_dict(a)) for a in actions],
        has_actions=has_action_markers(req.text),
        prose=strip_actions(req.text),
        diagnostics=(
            [DiagnosticModel(**d.__dict__) for d in diagnostics]
            if diagnostics is not None
            else None
        ),
    )


@action_router.post("/execute", response_model=ExecuteResponse)
async def execute(req: ExecuteRequest):
    try:
        action = action_from_dict(req.action.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    if CONFIG.get("require_manual_approval", True) and not req.approved:
        return ExecuteResponse(
            success=False, executed=False, message=f"Approval required for {action_label(action)}"
        )
    try:
        message = await executor.execute(action, CONFIG["workspace_root"])
    except ActionError as e:
        _raise_http(e)
    return ExecuteResponse(success=True, message=message)


@action_router.post("/apply", response_model=ApplyResponse)
async def apply(req: ApplyRequest):
    actions = parse_actions(req.text)
    models = [ActionModel(**action_to_dict(a)) for a in actions]
    preview = format_action_list(actions)

    if CONFIG.get("require_manual_approval", True) and not req.approved:
        return ApplyResponse(executed=False, actions=models, preview=preview)

    runner = ActionRunner(
        executor,
        stop_on_failure=CONFIG.get("stop_on_failure", True),
        max_actions=CONFIG["max_actions_per_message"],
    )
    report = await runner.run(actions, CONFIG["workspace_root"])
    return ApplyResponse(
        executed=True,
        actions=models,
        preview=preview,
        results=[_to_result_model(r) for r in report.results],
        ok=report.ok,
        summary=report.summary(),
    )


@action_router.get("/workspace", response_model=DirectoryListing)
async def workspace_listing(path: str = "."):
    try:
        listing = await executor.list_directory(path, CONFIG["workspace_root"])
    except ActionError as e:
        _raise_http(e)
    return DirectoryListing(path=path, **listing)


@action_router.post("/prompt", response_model=PromptResponse)
async def prompt(req: PromptRequest):
    root = CONFIG["workspace_root"]
    try:
        structure = await executor.analyze_project_structure(root) if req.include_structure else None
        files = await executor.read_project_files(req.files, root) if req.files else None
    except ActionError as e:
        _raise_http(e)
    return PromptResponse(
        prompt=build_action_prompt(req.request, req.context, structure=structure, files=files)
    )
