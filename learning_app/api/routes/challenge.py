"""
Challenge API routes: problem generation and answer evaluation.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from learning_app.core.database import get_db
from learning_app.schemas.challenge import (
    GenerateChallengeRequest,
    GenerateChallengeResponse,
    EvaluateAnswerRequest,
    EvaluateAnswerResponse,
    ProblemSchema,
)
from learning_app.services.challenge_flow import ChallengeFlow
from learning_app.services.challenge_service import ChallengeService, ChallengeServiceError
from learning_app.services.question_formatter import (
    is_answer_valid,
    format_answer_for_submission,
    format_reference_answer,
    grade_structured_answer,
)
from learning_app.services.session_service import SessionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/challenge", tags=["challenge"])


@router.post("/generate", response_model=GenerateChallengeResponse)
async def generate_challenge(
    request: GenerateChallengeRequest,
    db: AsyncSession = Depends(get_db)
) -> GenerateChallengeResponse:
    """
    Generate problems for a session's time range.

    Idempotent: when the session already has problems they are returned
    instead of calling the LLM again.
    """
    if not request.session_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="session_id is required"
        )

    session_service = SessionService()

    session = await session_service.get_session_by_id(request.session_id, db, include_relations=True)
    if not session:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found"
        )

    problems = list(session.problems)
    if not problems:
        source = session.source
        try:
            problems_data = await run_in_threadpool(
                ChallengeService().generate_problems,
                source.title,
                source.transcript,
                session.start_time,
                session.end_time
            )
        except ChallengeServiceError as e:
            logger.error("Error generating challenges for session %s: %s", session.id, e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=str(e)
            )

        problems = await session_service.create_problems(session.id, problems_data, db)

    flow = ChallengeFlow.resume(problems)

    return GenerateChallengeResponse(
        session_id=session.id,
        problems=[ProblemSchema.model_validate(p) for p in problems],
        progress=flow.snapshot()
    )


@router.post("/evaluate", response_model=EvaluateAnswerResponse)
async def evaluate_answer(
    request: EvaluateAnswerRequest,
    db: AsyncSession = Depends(get_db)
) -> EvaluateAnswerResponse:
    """
    Grade the answer to the session's current problem.

    - Validates the answer for the problem type
    - Formats it as readable text and asks the LLM for feedback
    - Structured problems with a stored solution are graded against it
    - Stores the evaluation and advances the challenge
    - Marks the session completed after its last problem
    """
    if not request.problem_id or request.answer is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="problem_id and answer are required"
        )

    session_service = SessionService()

    problem = await session_service.get_problem_by_id(request.problem_id, db)
    if not problem:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Problem not found"
        )

    if problem.is_evaluated:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Problem already evaluated"
        )

    flow = ChallengeFlow.resume(await session_service.get_problems(problem.session_id, db))
    if flow.current_problem is None or flow.current_problem.id != problem.id:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Answer the current problem first"
        )

    if not is_answer_valid(problem, request.answer):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Answer is not valid for this question type"
        )

    formatted_answer = format_answer_for_submission(problem, request.answer)

    flow.submit()
    try:
        evaluation = await run_in_threadpool(
            ChallengeService().evaluate_answer,
            problem.text,
            formatted_answer,
            format_reference_answer(problem)
        )
    except ChallengeServiceError as e:
        flow.evaluation_failed()
        logger.error("Error evaluating problem %s: %s", problem.id, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )

    is_correct = grade_structured_answer(problem, request.answer)
    if is_correct is None:
        is_correct = evaluation["is_correct"]

    problem = await session_service.save_evaluation(
        problem,
        user_answer=formatted_answer,
        is_correct=is_correct,
        feedback=evaluation["feedback"],
        next_step=evaluation["next_step"],
        db=db
    )
    flow.evaluated()
    flow.next()

    session_status = session_service.STATUS_CHALLENGING
    if flow.is_complete:
        session = await session_service.update_session_status(
            problem.session_id,
            session_service.STATUS_COMPLETED,
            db
        )
        session_status = session.status
        logger.info("Session %s completed", problem.session_id)

    return EvaluateAnswerResponse(
        is_correct=is_correct,
        feedback=evaluation["feedback"],
        next_step=evaluation["next_step"],
        problem=ProblemSchema.model_validate(problem),
        progress=flow.snapshot(),
        session_status=session_status
    )
