"""
Feature router — the seven Gemini-backed study tools.

Endpoints:
- POST /exam/analyze      — exam paper analysis
- POST /camera/analyze    — photographed problem (solver/teacher mode)
- POST /professor/ask     — grounded tutor answer
- POST /worksheets        — practice worksheet
- POST /solver/messages   — solver chat turn
- POST /notebook/analyze  — notebook digitization
- POST /quiz/questions    — one quiz battle question

Rate-limit failures that survive every key map to 429; other generation
failures to 502.
"""

import asyncio
from typing import Any, Awaitable

from fastapi import APIRouter, HTTPException, status

from backend.features import (
    analyze_exam,
    analyze_frame,
    analyze_notebook,
    ask_professor,
    generate_quiz_question,
    generate_worksheet,
    send_solver_message,
)
from backend.llm_router import FailureKind, LLMError, failure_kind_of
from backend.models import (
    CameraAnalysisResult,
    ExamAnalysis,
    NotebookAnalysis,
    ProfessorResponse,
    QuizQuestion,
    Worksheet,
)

from ..deps import get_runner, get_session_store, logger
from ..schemas import (
    ExamAnalyzeRequest,
    FeatureRequest,
    FrameAnalyzeRequest,
    NotebookAnalyzeRequest,
    ProfessorRequest,
    QuizQuestionRequest,
    SolverMessageRequest,
    SolverMessageResponse,
    WorksheetRequest,
)


router = APIRouter(tags=["Features"])


# =============================================================================
# HELPERS
# =============================================================================

async def _run(feature: str, call: Awaitable[Any]) -> Any:
    """Await a feature call and translate failures into HTTP errors."""
    try:
        return await call
    except LLMError as e:
        if failure_kind_of(e) is FailureKind.RATE_LIMITED:
            logger.warning("%s: all keys rate limited", feature)
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="AI service is busy. Please try again in a moment.",
            )
        logger.error("%s failed: %s", feature, e)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Failed to {feature}. Please try again.",
        )
    except asyncio.TimeoutError:
        logger.error("%s timed out", feature)
        raise HTTPException(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            detail=f"Timed out trying to {feature}.",
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))


async def _remember(prefix: str, request: FeatureRequest, payload: Any) -> None:
    """Store the result under the caller's session when one was given."""
    if not (request.user_id and request.session_id):
        return
    await get_session_store().save_result(prefix, request.user_id, request.session_id, payload)


def _dump(model) -> dict:
    return model.model_dump(mode="json", by_alias=True)


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.post("/exam/analyze", response_model=ExamAnalysis)
async def exam_analyze(request: ExamAnalyzeRequest):
    result = await _run("analyze exam", analyze_exam(get_runner(), request.data, request.mime_type))
    await _remember("exam", request, _dump(result))
    return result


@router.post("/camera/analyze", response_model=CameraAnalysisResult)
async def camera_analyze(request: FrameAnalyzeRequest):
    result = await _run("analyze frame", analyze_frame(get_runner(), request.data, request.mode))
    await _remember("cam", request, _dump(result))
    return result


@router.post("/professor/ask", response_model=ProfessorResponse)
async def professor_ask(request: ProfessorRequest):
    result = await _run(
        "ask professor",
        ask_professor(get_runner(), request.query, request.level, request.audio_data),
    )
    await _remember("prof", request, _dump(result))
    return result


@router.post("/worksheets", response_model=Worksheet)
async def worksheet_create(request: WorksheetRequest):
    result = await _run(
        "generate worksheet",
        generate_worksheet(get_runner(), request.topic, request.difficulty, request.count),
    )
    await _remember("sheet", request, _dump(result))
    return result


@router.post("/solver/messages", response_model=SolverMessageResponse)
async def solver_message(request: SolverMessageRequest):
    text = await _run(
        "generate a response",
        send_solver_message(get_runner(), request.history, request.message),
    )
    transcript = [_dump(m) for m in request.history] + [_dump(request.message)]
    transcript.append({"role": "model", "text": text})
    await _remember("solver", request, transcript)
    return SolverMessageResponse(text=text)


@router.post("/notebook/analyze", response_model=NotebookAnalysis)
async def notebook_analyze(request: NotebookAnalyzeRequest):
    result = await _run(
        "analyze notebook",
        analyze_notebook(get_runner(), request.data, request.mime_type),
    )
    await _remember("notebook", request, _dump(result))
    return result


@router.post("/quiz/questions", response_model=QuizQuestion)
async def quiz_question(request: QuizQuestionRequest):
    return await _run(
        "generate quiz question",
        generate_quiz_question(get_runner(), request.topic, request.grade),
    )
