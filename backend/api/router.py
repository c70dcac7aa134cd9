import asyncio
import logging
from typing import Awaitable, Callable

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import StreamingResponse
from pydantic import BaseModel
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import enforce_user_rate_limit
from api.errors import error_response, to_http_exception
from config import settings
from models.requests import JobMatchRequest, ResumeReviewRequest
from models.responses import CollaborativeResult, JobMatchResponse, ResumeReviewResponse
from models.schemas.preprocessing import PreprocessingResult
from services.errors import AIServiceError, AnalysisFailedError
from services.llm_client import SUPPORTED_PROVIDERS
from services.pipeline.job_match import multi_agent_job_match
from services.pipeline.resume_review import multi_agent_resume_review
from services.preprocessing import preprocess_job, preprocess_resume
from services.progress import ProgressStream, encode_event, encode_progress_message

logger = logging.getLogger(__name__)

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


@router.get("/health")
async def health():
    return {
        "status": "ok",
        "default_provider": settings.default_provider,
        "providers": {
            "ollama": settings.ollama_base_url,
            "openai": bool(settings.openai_api_key),
            "deepseek": bool(settings.deepseek_api_key),
            "gemini": bool(settings.gemini_api_key),
        },
    }


def _resolve_model(body: ResumeReviewRequest) -> tuple[str, str]:
    provider = body.provider or settings.default_provider
    if provider not in SUPPORTED_PROVIDERS:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported provider '{provider}'. Choose one of: {', '.join(SUPPORTED_PROVIDERS)}",
        )
    return provider, body.model_name or settings.default_model


def _require_text(result: PreprocessingResult) -> str:
    if not result.success:
        raise HTTPException(status_code=422, detail=result.error.model_dump(mode="json"))
    return result.data.normalized_text


def _resume_text(body: ResumeReviewRequest) -> str:
    source = body.resume_text if body.resume_text is not None else body.resume
    return _require_text(preprocess_resume(source))


def _job_text(body: JobMatchRequest) -> str:
    source = body.job_text if body.job_text is not None else body.job
    return _require_text(preprocess_job(source))


async def _stream_analysis(
    run: Callable[[ProgressStream], Awaitable[BaseModel]], provider: str
):
    """Relay progress frames while ``run`` works, then a result or error frame."""
    queue: asyncio.Queue = asyncio.Queue()
    task = asyncio.create_task(run(ProgressStream.queue_sink(queue)))
    try:
        while True:
            getter = asyncio.ensure_future(queue.get())
            done, _ = await asyncio.wait({getter, task}, return_when=asyncio.FIRST_COMPLETED)
            if getter in done:
                yield encode_progress_message(getter.result())
                continue
            getter.cancel()
            break

        while not queue.empty():
            yield encode_progress_message(queue.get_nowait())

        try:
            result = task.result()
        except (AIServiceError, AnalysisFailedError) as e:
            _, payload = error_response(e, provider)
            yield encode_event({"type": "error", **payload.model_dump(exclude_none=True)})
            return
        except Exception:
            logger.exception("Streaming analysis failed")
            _, payload = error_response(RuntimeError(), provider)
            yield encode_event({"type": "error", **payload.model_dump(exclude_none=True)})
            return

        yield encode_event({"type": "result", "data": result.model_dump(mode="json")})
    finally:
        if not task.done():
            task.cancel()


@router.post("/resume/review", response_model=CollaborativeResult[ResumeReviewResponse])
@limiter.limit("20/minute")
async def review_resume(
    request: Request,
    body: ResumeReviewRequest,
    user_id: str = Depends(enforce_user_rate_limit),
):
    provider, model_name = _resolve_model(body)
    resume_text = _resume_text(body)
    try:
        return await multi_agent_resume_review(resume_text, provider, model_name)
    except (AIServiceError, AnalysisFailedError) as e:
        raise to_http_exception(e, provider) from e


@router.post("/resume/review/stream")
@limiter.limit("20/minute")
async def review_resume_stream(
    request: Request,
    body: ResumeReviewRequest,
    user_id: str = Depends(enforce_user_rate_limit),
):
    provider, model_name = _resolve_model(body)
    resume_text = _resume_text(body)

    def run(progress: ProgressStream):
        return multi_agent_resume_review(resume_text, provider, model_name, progress)

    return StreamingResponse(
        _stream_analysis(run, provider),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


@router.post("/job-match", response_model=CollaborativeResult[JobMatchResponse])
@limiter.limit("20/minute")
async def match_job(
    request: Request,
    body: JobMatchRequest,
    user_id: str = Depends(enforce_user_rate_limit),
):
    provider, model_name = _resolve_model(body)
    resume_text = _resume_text(body)
    job_text = _job_text(body)
    try:
        return await multi_agent_job_match(resume_text, job_text, provider, model_name)
    except (AIServiceError, AnalysisFailedError) as e:
        raise to_http_exception(e, provider) from e


@router.post("/job-match/stream")
@limiter.limit("20/minute")
async def match_job_stream(
    request: Request,
    body: JobMatchRequest,
    user_id: str = Depends(enforce_user_rate_limit),
):
    provider, model_name = _resolve_model(body)
    resume_text = _resume_text(body)
    job_text = _job_text(body)

    def run(progress: ProgressStream):
        return multi_agent_job_match(resume_text, job_text, provider, model_name, progress)

    return StreamingResponse(
        _stream_analysis(run, provider),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
