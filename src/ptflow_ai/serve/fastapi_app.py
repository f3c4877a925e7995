"""FastAPI service for the AI feature adapters.

Endpoints:
- GET /health
- POST /api/ai/soap-note
- POST /api/ai/code-suggestions
- POST /api/ai/claim-justification
- POST /api/ai/home-plan
- POST /api/ai/message-response
- POST /api/ai/progress-analysis
- POST /api/ai/progress-summary
- POST /api/ai/session-summary
- POST /api/ai/treatment-plan

Every /api/ai endpoint requires a session and answers errors as ``{"error": ...}``.
"""
from __future__ import annotations
import functools
import logging
from typing import Any, Callable

from fastapi import APIRouter, Body, Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ptflow_ai.adapters import (
    claim_justification,
    code_suggestions,
    home_plan,
    message_response,
    progress_analysis,
    progress_summary,
    session_summary,
    soap_note,
    treatment_plan,
)
from ptflow_ai.adapters.base import GenerationError, Generator, InvalidInputError
from ptflow_ai.adapters.registry import prompt_names
from ptflow_ai.common.config import Settings
from ptflow_ai.common.logging_setup import setup_logging
from ptflow_ai.common.templates import PromptPack, find_pack_problems, load_template
from ptflow_ai.gateway.client import GatewayClient
from ptflow_ai.serve.auth import SessionVerifier, StaticTokenVerifier, Unauthorized, has_session, require_session

LOGGER = logging.getLogger("ptflow.api")

router = APIRouter(prefix="/api/ai", dependencies=[Depends(require_session)])


def get_gateway(request: Request) -> Generator:
    return request.app.state.gateway


def get_prompts(request: Request) -> PromptPack:
    return request.app.state.prompts


def _guarded(message: str, details: bool = False) -> Callable:
    """Turn unexpected exceptions into a 500 ``{"error": message}`` response.

    Adapter errors pass through to the app's exception handlers.
    """
    def decorator(fn: Callable) -> Callable:
        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return fn(*args, **kwargs)
            except (InvalidInputError, GenerationError):
                raise
            except Exception as e:
                LOGGER.exception("%s", message)
                content = {"error": message}
                if details:
                    content["details"] = type(e).__name__
                return JSONResponse(status_code=500, content=content)
        return wrapper
    return decorator


@router.post("/soap-note", response_model=soap_note.SoapNoteOutput)
@_guarded("Failed to generate SOAP note")
def soap_note_endpoint(
    body: soap_note.SoapNoteInput,
    gateway: Generator = Depends(get_gateway),
    prompts: PromptPack = Depends(get_prompts),
) -> soap_note.SoapNoteOutput:
    return soap_note.handle(body, gateway, prompts)


@router.post("/code-suggestions", response_model=code_suggestions.CodeSuggestionsOutput)
@_guarded("Failed to generate code suggestions")
def code_suggestions_endpoint(
    body: code_suggestions.CodeSuggestionsInput,
    gateway: Generator = Depends(get_gateway),
    prompts: PromptPack = Depends(get_prompts),
) -> code_suggestions.CodeSuggestionsOutput:
    return code_suggestions.handle(body, gateway, prompts)


@router.post("/claim-justification", response_model=claim_justification.ClaimJustificationOutput)
@_guarded("Internal server error")
def claim_justification_endpoint(
    body: dict[str, Any] = Body(...),
    gateway: Generator = Depends(get_gateway),
    prompts: PromptPack = Depends(get_prompts),
) -> claim_justification.ClaimJustificationOutput:
    return claim_justification.handle(claim_justification.decode(body), gateway, prompts)


@router.post("/home-plan", response_model=home_plan.HomePlanOutput)
@_guarded("Internal server error")
def home_plan_endpoint(
    body: home_plan.HomePlanInput,
    gateway: Generator = Depends(get_gateway),
    prompts: PromptPack = Depends(get_prompts),
) -> home_plan.HomePlanOutput:
    return home_plan.handle(body, gateway, prompts)


@router.post("/message-response", response_model=message_response.MessageResponseOutput)
@_guarded("Failed to generate message response")
def message_response_endpoint(
    body: message_response.MessageResponseInput,
    gateway: Generator = Depends(get_gateway),
    prompts: PromptPack = Depends(get_prompts),
) -> message_response.MessageResponseOutput:
    return message_response.handle(body, gateway, prompts)


@router.post("/progress-analysis", response_model=progress_analysis.ProgressAnalysisOutput)
@_guarded("Failed to generate progress analysis", details=True)
def progress_analysis_endpoint(
    body: progress_analysis.ProgressAnalysisInput,
    gateway: Generator = Depends(get_gateway),
    prompts: PromptPack = Depends(get_prompts),
) -> progress_analysis.ProgressAnalysisOutput:
    return progress_analysis.handle(body, gateway, prompts)


@router.post("/progress-summary", response_model=progress_summary.ProgressSummaryOutput)
@_guarded("Internal server error")
def progress_summary_endpoint(
    body: progress_summary.ProgressSummaryInput,
    gateway: Generator = Depends(get_gateway),
    prompts: PromptPack = Depends(get_prompts),
) -> progress_summary.ProgressSummaryOutput:
    return progress_summary.handle(body, gateway, prompts)


@router.post("/session-summary", response_model=session_summary.SessionSummaryOutput)
@_guarded("Internal server error")
def session_summary_endpoint(
    body: session_summary.SessionSummaryInput,
    gateway: Generator = Depends(get_gateway),
    prompts: PromptPack = Depends(get_prompts),
) -> session_summary.SessionSummaryOutput:
    return session_summary.handle(body, gateway, prompts)


@router.post("/treatment-plan", response_model=treatment_plan.TreatmentPlanOutput)
@_guarded("Failed to generate treatment plan")
def treatment_plan_endpoint(
    body: treatment_plan.TreatmentPlanInput,
    gateway: Generator = Depends(get_gateway),
    prompts: PromptPack = Depends(get_prompts),
) -> treatment_plan.TreatmentPlanOutput:
    return treatment_plan.handle(body, gateway, prompts)


def _unauthorized(request: Request, exc: Unauthorized) -> JSONResponse:
    return JSONResponse(status_code=401, content={"error": "Unauthorized"})


def _invalid_input(request: Request, exc: InvalidInputError) -> JSONResponse:
    LOGGER.info("Rejected %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=400,
        content={"error": str(exc), "received": jsonable_encoder(exc.received)},
    )


def _invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
    # The body is parsed before dependencies run, so the session gate is repeated here.
    if request.url.path.startswith(router.prefix) and not has_session(request):
        return _unauthorized(request, Unauthorized())
    LOGGER.info("Rejected %s: %d body validation error(s)", request.url.path, len(exc.errors()))
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body", "received": jsonable_encoder(exc.body)},
    )


def _generation_failed(request: Request, exc: GenerationError) -> JSONResponse:
    LOGGER.error("Generation failed for %s: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": str(exc)})


def create_app(
    settings: Settings | None = None,
    gateway: Generator | None = None,
    session_verifier: SessionVerifier | None = None,
    prompts: PromptPack | None = None,
) -> FastAPI:
    """
    Build the service.

    Args:
        settings: Process settings; read from the environment when omitted.
        gateway: Completion client; a GatewayClient over ``settings`` by default.
        session_verifier: Token check supplied by the session provider.
        prompts: Prompt pack; loaded from ``settings.prompts_path`` by default.
    """
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level)

    if not settings.ai_configured:
        LOGGER.warning("OPENROUTER_API_KEY is not set. AI features will not work.")

    prompts = prompts if prompts is not None else load_template(settings.prompts_path)
    problems = find_pack_problems(prompts, prompt_names())
    if problems:
        LOGGER.warning("Prompt pack problems: %s", "; ".join(problems))

    app = FastAPI(title=settings.app_title)
    app.state.settings = settings
    app.state.gateway = gateway or GatewayClient(settings)
    app.state.prompts = prompts
    app.state.session_verifier = session_verifier or StaticTokenVerifier(settings.session_tokens)

    app.add_exception_handler(Unauthorized, _unauthorized)
    app.add_exception_handler(InvalidInputError, _invalid_input)
    app.add_exception_handler(RequestValidationError, _invalid_body)
    app.add_exception_handler(GenerationError, _generation_failed)

    @app.get("/health")
    def health() -> dict[str, Any]:
        return {"status": "ok", "model": settings.model, "aiConfigured": settings.ai_configured}

    app.include_router(router)
    return app
