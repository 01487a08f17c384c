"""
Session Service for study sessions and their problems.
"""
from datetime import datetime
from typing import Optional, List, Dict, Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from learning_app.core.constants import SessionStatus
from learning_app.models.problem import Problem
from learning_app.models.session import Session


class SessionServiceError(Exception):
    """Custom exception for session service errors."""
    pass


class SessionService:
    """Service for session and problem database operations."""

    STATUS_CHALLENGING = SessionStatus.CHALLENGING
    STATUS_COMPLETED = SessionStatus.COMPLETED

    async def create_session(
        self,
        viewer_id: str,
        source_id: UUID,
        start_time: int,
        end_time: Optional[int],
        db: AsyncSession
    ) -> Session:
        """Create a session in the challenging state."""
        session = Session(
            viewer_id=viewer_id,
            source_id=source_id,
            start_time=start_time,
            end_time=end_time,
            status=self.STATUS_CHALLENGING
        )
        db.add(session)
        await db.commit()
        await db.refresh(session)
        return session

    async def get_session_by_id(
        self,
        session_id: UUID,
        db: AsyncSession,
        include_relations: bool = False
    ) -> Optional[Session]:
        """
        Get session by ID.

        Args:
            session_id: Session UUID
            db: Database session
            include_relations: Whether to eagerly load source and problems
        """
        query = select(Session).where(Session.id == session_id)

        if include_relations:
            query = query.options(
                selectinload(Session.source),
                selectinload(Session.problems)
            ).execution_options(populate_existing=True)

        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_last_completed_session(
        self,
        viewer_id: str,
        source_id: UUID,
        db: AsyncSession
    ) -> Optional[Session]:
        """Most recent completed session of a viewer on a source."""
        query = (
            select(Session)
            .where(
                Session.viewer_id == viewer_id,
                Session.source_id == source_id,
                Session.status == self.STATUS_COMPLETED
            )
            .order_by(Session.created_at.desc())
            .limit(1)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def update_session_status(
        self,
        session_id: UUID,
        status: str,
        db: AsyncSession
    ) -> Optional[Session]:
        """
        Update session status.

        Raises:
            SessionServiceError: If the status is unknown
        """
        if status not in SessionStatus.ALL:
            raise SessionServiceError(f"Invalid status '{status}'")

        session = await self.get_session_by_id(session_id, db)
        if not session:
            return None

        session.status = status
        await db.commit()
        await db.refresh(session)
        return session

    async def get_problems(
        self,
        session_id: UUID,
        db: AsyncSession
    ) -> List[Problem]:
        """Problems of a session in display order."""
        result = await db.execute(
            select(Problem)
            .where(Problem.session_id == session_id)
            .order_by(Problem.position)
        )
        return list(result.scalars().all())

    async def create_problems(
        self,
        session_id: UUID,
        problems_data: List[Dict[str, Any]],
        db: AsyncSession
    ) -> List[Problem]:
        """Store generated problems in bulk, keeping their order."""
        problems = [
            Problem(
                session_id=session_id,
                position=position,
                type=data["type"],
                text=data["text"],
                difficulty=data.get("difficulty"),
                options=data.get("options"),
                column_a=data.get("column_a"),
                column_b=data.get("column_b"),
                solution=data.get("solution")
            )
            for position, data in enumerate(problems_data)
        ]
        db.add_all(problems)
        await db.commit()
        return await self.get_problems(session_id, db)

    async def get_problem_by_id(
        self,
        problem_id: UUID,
        db: AsyncSession
    ) -> Optional[Problem]:
        result = await db.execute(select(Problem).where(Problem.id == problem_id))
        return result.scalar_one_or_none()

    async def save_evaluation(
        self,
        problem: Problem,
        user_answer: str,
        is_correct: bool,
        feedback: str,
        next_step: str,
        db: AsyncSession
    ) -> Problem:
        """Record the graded answer on a problem."""
        problem.user_answer = user_answer
        problem.is_correct = is_correct
        problem.feedback = feedback
        problem.next_step = next_step
        problem.evaluated_at = datetime.utcnow()
        await db.commit()
        await db.refresh(problem)
        return problem
