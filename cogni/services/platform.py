"""
LearningPlatform - the single owner of platform state.

Every mutation goes through one asyncio.Lock, builds new snapshots, persists
them to the document store and only then swaps them in. A failing operation
therefore leaves users, attempts and content exactly as they were.
Readers get deep copies, never the live objects.
"""

import asyncio
from collections import Counter
from datetime import datetime, timedelta
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel

from cogni.ai.advisor import AdvisoryService, GradeSuggestion
from cogni.domain.attempt import Alert, AlertSeverity, Attempt
from cogni.domain.content import Content, ContentKind
from cogni.domain.errors import (
    AuthFailure,
    CogniError,
    InvalidInputError,
    NotFoundError,
    PermissionDeniedError,
)
from cogni.domain.exam import Answer, Exam, coerce_answer
from cogni.domain.user import User, UserRole, utcnow
from cogni.engines.assessment.access import AccessPolicy, Library
from cogni.engines.assessment.exam_session import ExamSession
from cogni.engines.assessment.progression import LevelChange, ProgressionEngine
from cogni.engines.assessment.scoring import ScoreOutcome, ScoringEngine
from cogni.engines.grading.workflow import GradingResult, GradingWorkflow
from cogni.engines.scenario.session import ScenarioSession
from cogni.engines.scenario.state_machine import ScenarioStateMachine, ScenarioTransition
from cogni.kernel.identity.identity_service import CredentialRecord, IdentityService
from cogni.kernel.store.document_store import (
    ALERTS_KEY,
    ATTEMPTS_KEY,
    CONTENTS_KEY,
    EXAMS_KEY,
    SESSION_USER_KEY,
    USERS_DB_KEY,
    DocumentStore,
)
from cogni.logging_config import get_logger
from cogni.services import seed

logger = get_logger(__name__)


class SubmissionResult(BaseModel):
    """Outcome of finalizing an exam."""

    attempt: Attempt
    user: User
    outcome: ScoreOutcome
    level_change: Optional[LevelChange] = None


class PlatformAnalytics(BaseModel):
    """Aggregate numbers for the admin and teacher panels."""

    total_users: int
    citizens: int
    unassessed_citizens: int
    total_attempts: int
    graded_attempts: int
    pending_attempts: int
    average_score: Optional[float] = None
    active_contents: int
    level_distribution: Dict[str, int] = {}
    recent_scores: List[int] = []


_UNCHANGED = object()


def _dump(items: List[BaseModel]) -> List[Dict[str, Any]]:
    return [item.model_dump(mode="json") for item in items]


class LearningPlatform:
    """
    Owns users, content, exams, attempts and alerts.

    Usage:
        platform = LearningPlatform(InMemoryDocumentStore())
        await platform.load()
        user = await platform.register("Ali", "ali@example.com", "secret123")
    """

    RECENT_SCORES = 10
    # Finalized exam sessions and finished scenario walks stay readable this long
    SESSION_RETENTION = timedelta(hours=1)
    ABANDONED_SCENARIO_AFTER = timedelta(hours=24)

    def __init__(
        self,
        store: DocumentStore,
        advisor: Optional[AdvisoryService] = None,
        seed_demo: bool = False,
    ):
        self.store = store
        self.advisor = advisor
        self.seed_demo = seed_demo
        self._lock = asyncio.Lock()

        self._users: Dict[str, CredentialRecord] = {}
        self._contents: Dict[str, Content] = {}
        self._exams: Dict[str, Exam] = {}
        self._attempts: List[Attempt] = []
        self._alerts: List[Alert] = []
        self._session_user_id: Optional[str] = None

        # Transient, not persisted
        self._exam_sessions: Dict[str, ExamSession] = {}
        self._scenario_sessions: Dict[str, ScenarioSession] = {}

    # ------------------------------------------------------------------ #
    # Loading and committing
    # ------------------------------------------------------------------ #

    async def load(self) -> "LearningPlatform":
        """Read every collection from the store; built-in records fill the gaps."""
        async with self._lock:
            users_doc = await self.store.get(USERS_DB_KEY) or []
            contents_doc = await self.store.get(CONTENTS_KEY)
            exams_doc = await self.store.get(EXAMS_KEY)
            attempts_doc = await self.store.get(ATTEMPTS_KEY) or []
            alerts_doc = await self.store.get(ALERTS_KEY) or []
            session_doc = await self.store.get(SESSION_USER_KEY)

            records = [CredentialRecord.model_validate(r) for r in users_doc]
            self._users = {r.user.id: r for r in records}

            if contents_doc is None:
                contents = seed.demo_contents() if self.seed_demo else []
            else:
                contents = [Content.model_validate(c) for c in contents_doc]
            self._contents = {c.id: c for c in contents}

            if exams_doc is None:
                exams = [seed.placement_exam()]
                if self.seed_demo:
                    exams += seed.demo_exams()
            else:
                exams = [Exam.model_validate(e) for e in exams_doc]
            self._exams = {e.id: e for e in exams}

            self._attempts = [Attempt.model_validate(a) for a in attempts_doc]
            self._alerts = [Alert.model_validate(a) for a in alerts_doc]
            self._session_user_id = session_doc.get("id") if session_doc else None

        logger.info(
            "Platform state loaded",
            extra={
                "users": len(self._users),
                "contents": len(self._contents),
                "exams": len(self._exams),
                "attempts": len(self._attempts),
            },
        )
        return self

    async def _commit(
        self,
        *,
        users: Optional[Dict[str, CredentialRecord]] = None,
        contents: Optional[Dict[str, Content]] = None,
        exams: Optional[Dict[str, Exam]] = None,
        attempts: Optional[List[Attempt]] = None,
        alerts: Optional[List[Alert]] = None,
        session_user_id: Any = _UNCHANGED,
    ) -> None:
        """Persist the given collections whole, then swap them in. Caller holds the lock."""
        documents: Dict[str, Any] = {}
        if users is not None:
            documents[USERS_DB_KEY] = _dump(list(users.values()))
        if contents is not None:
            documents[CONTENTS_KEY] = _dump(list(contents.values()))
        if exams is not None:
            documents[EXAMS_KEY] = _dump(list(exams.values()))
        if attempts is not None:
            documents[ATTEMPTS_KEY] = _dump(attempts)
        if alerts is not None:
            documents[ALERTS_KEY] = _dump(alerts)

        new_session_id = self._session_user_id if session_user_id is _UNCHANGED else session_user_id
        # The session user document mirrors the profile, so it follows every users write
        if session_user_id is not _UNCHANGED or users is not None:
            user_map = users if users is not None else self._users
            record = user_map.get(new_session_id) if new_session_id else None
            documents[SESSION_USER_KEY] = record.user.model_dump(mode="json") if record else None

        await self.store.put_many(documents)

        if users is not None:
            self._users = users
        if contents is not None:
            self._contents = contents
        if exams is not None:
            self._exams = exams
        if attempts is not None:
            self._attempts = attempts
        if alerts is not None:
            self._alerts = alerts
        self._session_user_id = new_session_id

    def _with_user(self, user: User) -> Dict[str, CredentialRecord]:
        users = dict(self._users)
        users[user.id] = users[user.id].model_copy(update={"user": user})
        return users

    # ------------------------------------------------------------------ #
    # Lookups (deep copies)
    # ------------------------------------------------------------------ #

    def _user(self, user_id: str) -> User:
        record = self._users.get(user_id)
        if record is None:
            raise NotFoundError("user", user_id)
        return record.user

    def _exam(self, exam_id: str) -> Exam:
        exam = self._exams.get(exam_id)
        if exam is None:
            raise NotFoundError("exam", exam_id)
        return exam

    def _content(self, content_id: str) -> Content:
        content = self._contents.get(content_id)
        if content is None:
            raise NotFoundError("content", content_id)
        return content

    def _attempt(self, attempt_id: str) -> Attempt:
        for attempt in self._attempts:
            if attempt.id == attempt_id:
                return attempt
        raise NotFoundError("attempt", attempt_id)

    def _require_privileged(self, user_id: str) -> User:
        user = self._user(user_id)
        if not user.is_privileged:
            raise PermissionDeniedError("teacher or admin role required")
        return user

    def _require_admin(self, user_id: str) -> User:
        user = self._user(user_id)
        if user.role != UserRole.ADMIN:
            raise PermissionDeniedError("admin role required")
        return user

    def get_user(self, user_id: str) -> User:
        return self._user(user_id).model_copy(deep=True)

    def get_exam(self, exam_id: str) -> Exam:
        return self._exam(exam_id).model_copy(deep=True)

    def get_content(self, content_id: str) -> Content:
        return self._content(content_id).model_copy(deep=True)

    def get_attempt(self, attempt_id: str) -> Attempt:
        return self._attempt(attempt_id).model_copy(deep=True)

    def session_user(self) -> Optional[User]:
        if self._session_user_id is None or self._session_user_id not in self._users:
            return None
        return self.get_user(self._session_user_id)

    def list_contents(self) -> List[Content]:
        return [c.model_copy(deep=True) for c in self._contents.values()]

    def list_exams(self, content_id: Optional[str] = None) -> List[Exam]:
        return [
            e.model_copy(deep=True)
            for e in self._exams.values()
            if content_id is None or e.content_id == content_id
        ]

    def list_attempts(self, user_id: Optional[str] = None) -> List[Attempt]:
        return [
            a.model_copy(deep=True)
            for a in self._attempts
            if user_id is None or a.user_id == user_id
        ]

    def list_alerts(self) -> List[Alert]:
        return sorted((a.model_copy() for a in self._alerts), key=lambda a: a.date, reverse=True)

    def pending_attempts(self) -> List[Attempt]:
        return [a.model_copy(deep=True) for a in GradingWorkflow.pending(self._attempts)]

    # ------------------------------------------------------------------ #
    # Credentials
    # ------------------------------------------------------------------ #

    async def register(
        self,
        name: str,
        email: str,
        password: str,
        role: UserRole = UserRole.CITIZEN,
    ) -> User:
        """Create an account and make it the session user. Raises DuplicateEmailError."""
        async with self._lock:
            record = IdentityService(self._users.values()).register(name, email, password, role)
            users = dict(self._users)
            users[record.user.id] = record
            await self._commit(users=users, session_user_id=record.user.id)
        logger.info("User registered", extra={"user_id": record.user.id, "role": role.value})
        return record.user.model_copy(deep=True)

    async def authenticate(self, email: str, password: str) -> Union[User, AuthFailure]:
        """Check credentials; on success the user becomes the session user."""
        async with self._lock:
            result = IdentityService(self._users.values()).authenticate(email, password)
            if isinstance(result, AuthFailure):
                logger.info("Authentication failed", extra={"email": result.email})
                return result
            await self._commit(session_user_id=result.id)
        return result.model_copy(deep=True)

    async def sign_out(self) -> None:
        async with self._lock:
            await self._commit(session_user_id=None)

    # ------------------------------------------------------------------ #
    # Authoring
    # ------------------------------------------------------------------ #

    async def create_content(self, author_id: str, content: Content) -> Content:
        """Publish a content item. Scenario graphs are validated first."""
        async with self._lock:
            self._require_privileged(author_id)
            if content.id in self._contents:
                raise InvalidInputError(f"content {content.id} already exists")
            content = content.model_copy(update={"author_id": author_id})
            if content.kind == ContentKind.SCENARIO:
                ScenarioStateMachine.ensure_valid(content)
            contents = dict(self._contents)
            contents[content.id] = content
            await self._commit(contents=contents)
        logger.info("Content created", extra={"content_id": content.id, "author_id": author_id})
        return content.model_copy(deep=True)

    async def set_content_active(self, author_id: str, content_id: str, is_active: bool) -> Content:
        async with self._lock:
            self._require_privileged(author_id)
            content = self._content(content_id).model_copy(update={"is_active": is_active})
            contents = dict(self._contents)
            contents[content_id] = content
            await self._commit(contents=contents)
        return content.model_copy(deep=True)

    async def create_exam(self, author_id: str, exam: Exam) -> Exam:
        """Attach an exam to existing content."""
        async with self._lock:
            self._require_privileged(author_id)
            if exam.is_placement or exam.id in self._exams:
                raise InvalidInputError(f"exam {exam.id} already exists")
            self._content(exam.content_id)
            exams = dict(self._exams)
            exams[exam.id] = exam
            await self._commit(exams=exams)
        logger.info("Exam created", extra={"exam_id": exam.id, "content_id": exam.content_id})
        return exam.model_copy(deep=True)

    # ------------------------------------------------------------------ #
    # Access
    # ------------------------------------------------------------------ #

    def can_access(self, user_id: str, content_id: str) -> bool:
        return AccessPolicy.can_access(self._user(user_id), self._content(content_id))

    def can_take_exam(self, user_id: str, exam_id: str) -> bool:
        exam = self._exam(exam_id)
        return AccessPolicy.can_take_exam(
            self._user(user_id), exam, self._contents.get(exam.content_id)
        )

    def library(self, user_id: str, kind: Optional[ContentKind] = None) -> Library:
        return AccessPolicy.library(self._user(user_id), self.list_contents(), kind)

    def view_content(self, user_id: str, content_id: str) -> Content:
        """Content for display, behind the access gate."""
        if not self.can_access(user_id, content_id):
            raise PermissionDeniedError(f"content {content_id} is locked for this user")
        return self.get_content(content_id)

    def _check_exam_entry(self, user: User, exam: Exam, retake: bool) -> None:
        if not exam.is_active:
            raise InvalidInputError(f"exam {exam.id} is not active")
        if not AccessPolicy.can_take_exam(user, exam, self._contents.get(exam.content_id)):
            raise PermissionDeniedError(
                "placement exam required" if user.needs_placement else f"exam {exam.id} is locked"
            )
        if exam.is_placement and user.level > 0 and not retake:
            raise InvalidInputError("placement already completed")

    # ------------------------------------------------------------------ #
    # Exams and attempts
    # ------------------------------------------------------------------ #

    async def submit_attempt(
        self,
        user_id: str,
        exam_id: str,
        answers: Mapping[str, Any],
        *,
        retake: bool = False,
        now: Optional[datetime] = None,
    ) -> SubmissionResult:
        """Score answers, record the attempt and apply progression when a score exists."""
        async with self._lock:
            user = self._user(user_id)
            exam = self._exam(exam_id)
            self._check_exam_entry(user, exam, retake)
            return await self._record_attempt(user, exam, answers, retake=retake, now=now)

    async def _record_attempt(
        self,
        user: User,
        exam: Exam,
        answers: Mapping[str, Any],
        *,
        retake: bool,
        now: Optional[datetime],
    ) -> SubmissionResult:
        try:
            tagged = {qid: coerce_answer(a) for qid, a in answers.items()}
        except (TypeError, ValueError) as exc:
            raise InvalidInputError(f"malformed answers: {exc}") from exc

        outcome = ScoringEngine.score(exam, tagged)
        attempt_kwargs: Dict[str, Any] = {
            "user_id": user.id,
            "exam_id": exam.id,
            "answers": tagged,
            "score": outcome.score,
            "is_graded": outcome.is_graded,
        }
        if now is not None:
            attempt_kwargs["date"] = now
        attempt = Attempt(**attempt_kwargs)
        advanced = ProgressionEngine.advance(user, exam, outcome.score, now=now, retake=retake)

        users = self._with_user(advanced) if advanced is not user else None
        await self._commit(users=users, attempts=[*self._attempts, attempt])

        logger.info(
            "Attempt recorded",
            extra={
                "attempt_id": attempt.id,
                "exam_id": exam.id,
                "user_id": user.id,
                "score": outcome.score,
                "manual_grading": outcome.requires_manual_grading,
            },
        )
        return SubmissionResult(
            attempt=attempt.model_copy(deep=True),
            user=advanced.model_copy(deep=True),
            outcome=outcome,
            level_change=ProgressionEngine.describe(user, advanced, exam),
        )

    async def advance(self, user_id: str, exam_id: str, score: Optional[int]) -> User:
        """Apply a finalized score directly. NotFoundError before anything changes."""
        async with self._lock:
            user = self._user(user_id)
            exam = self._exam(exam_id)
            advanced = ProgressionEngine.advance(user, exam, score)
            if advanced is not user:
                await self._commit(users=self._with_user(advanced))
        return advanced.model_copy(deep=True)

    # Timed sessions

    async def start_exam(
        self,
        user_id: str,
        exam_id: str,
        *,
        retake: bool = False,
        now: Optional[datetime] = None,
    ) -> ExamSession:
        async with self._lock:
            user = self._user(user_id)
            exam = self._exam(exam_id)
            open_session = next(
                (
                    s for s in self._exam_sessions.values()
                    if s.is_open and s.user_id == user.id and s.exam_id == exam.id
                ),
                None,
            )
            if open_session is not None:
                if not open_session.is_overdue(now):
                    raise InvalidInputError(
                        f"exam {exam.id} already has a session in progress ({open_session.id})"
                    )
                # The stale session counts before the new one starts
                await self._finalize_session(open_session, expired=True, now=now)
                user = self._user(user_id)
            self._check_exam_entry(user, exam, retake)
            session = ExamSession.start(user.id, exam, now=now, retake=retake)
            self._exam_sessions[session.id] = session
        logger.info("Exam session started", extra={"session_id": session.id, "exam_id": exam_id})
        return session.model_copy(deep=True)

    def _exam_session(self, session_id: str) -> ExamSession:
        session = self._exam_sessions.get(session_id)
        if session is None:
            raise NotFoundError("exam session", session_id)
        return session

    def get_exam_session(self, session_id: str) -> ExamSession:
        return self._exam_session(session_id).model_copy(deep=True)

    async def answer_question(
        self,
        session_id: str,
        question_id: str,
        answer: Union[Answer, int, str],
        now: Optional[datetime] = None,
    ) -> ExamSession:
        async with self._lock:
            session = self._exam_session(session_id)
            exam = self._exam(session.exam_id)
            tagged = coerce_answer(answer)
            ScoringEngine.validate_answers(exam, {question_id: tagged})
            session.record_answer(question_id, tagged, now=now)
            return session.model_copy(deep=True)

    async def cancel_exam(self, session_id: str) -> None:
        """User abandons the exam; no attempt is created."""
        async with self._lock:
            self._exam_session(session_id).cancel()
            del self._exam_sessions[session_id]
        logger.info("Exam session cancelled", extra={"session_id": session_id})

    async def submit_exam(self, session_id: str, now: Optional[datetime] = None) -> SubmissionResult:
        async with self._lock:
            session = self._exam_session(session_id)
            return await self._finalize_session(session, expired=session.is_overdue(now), now=now)

    async def expire_exam(self, session_id: str, now: Optional[datetime] = None) -> SubmissionResult:
        """Timer ran out: force-submit. Repeated expiry returns the same attempt."""
        async with self._lock:
            return await self._finalize_session(self._exam_session(session_id), expired=True, now=now)

    async def expire_overdue_sessions(self, now: Optional[datetime] = None) -> List[SubmissionResult]:
        """Force-submit every session past its deadline. One failing session never stops the rest."""
        results: List[SubmissionResult] = []
        async with self._lock:
            overdue = [s for s in self._exam_sessions.values() if s.is_overdue(now)]
            for session in overdue:
                try:
                    results.append(await self._finalize_session(session, expired=True, now=now))
                except Exception as exc:
                    logger.error("Failed to expire exam session %s: %s", session.id, exc)
        return results

    async def prune_sessions(self, now: Optional[datetime] = None) -> int:
        """Drop finalized exam sessions and stale scenario walks past their retention."""
        now = now or utcnow()
        async with self._lock:
            stale_exams = [
                sid for sid, s in self._exam_sessions.items()
                if s.is_finalized and s.deadline + self.SESSION_RETENTION <= now
            ]
            stale_scenarios = [
                sid for sid, s in self._scenario_sessions.items()
                if s.started_at
                + (self.SESSION_RETENTION if s.finished else self.ABANDONED_SCENARIO_AFTER)
                <= now
            ]
            for sid in stale_exams:
                del self._exam_sessions[sid]
            for sid in stale_scenarios:
                del self._scenario_sessions[sid]
        pruned = len(stale_exams) + len(stale_scenarios)
        if pruned:
            logger.info(
                "Sessions pruned",
                extra={"exam_sessions": len(stale_exams), "scenario_sessions": len(stale_scenarios)},
            )
        return pruned

    async def _finalize_session(
        self,
        session: ExamSession,
        *,
        expired: bool,
        now: Optional[datetime],
    ) -> SubmissionResult:
        if session.is_finalized:
            attempt = self._attempt(session.attempt_id)
            exam = self._exam(session.exam_id)
            return SubmissionResult(
                attempt=attempt.model_copy(deep=True),
                user=self.get_user(session.user_id),
                outcome=ScoringEngine.score(exam, attempt.answers),
            )
        if not session.is_open:
            raise InvalidInputError(f"session {session.id} is {session.state.value}")

        user = self._user(session.user_id)
        exam = self._exam(session.exam_id)
        try:
            result = await self._record_attempt(
                user, exam, session.answers, retake=session.retake, now=now
            )
        except CogniError as exc:
            # Unrecordable: discard rather than leave it open
            session.cancel()
            del self._exam_sessions[session.id]
            logger.warning(
                "Exam session discarded",
                extra={"session_id": session.id, "exam_id": exam.id, "reason": str(exc)},
            )
            raise
        session.finalize(expired=expired)
        session.attempt_id = result.attempt.id
        if expired:
            logger.info("Exam session expired", extra={"session_id": session.id})
        return result

    # ------------------------------------------------------------------ #
    # Grading
    # ------------------------------------------------------------------ #

    async def grade_attempt(self, grader_id: str, attempt_id: str, score: int) -> GradingResult:
        async with self._lock:
            grader = self._user(grader_id)
            attempt = self._attempt(attempt_id)
            user = self._user(attempt.user_id)
            exam = self._exam(attempt.exam_id)

            result = GradingWorkflow.grade(attempt, user, exam, score, grader)
            if result.applied:
                attempts = [result.attempt if a.id == attempt_id else a for a in self._attempts]
                await self._commit(users=self._with_user(result.user), attempts=attempts)
        return result.model_copy(deep=True)

    async def suggest_grade(self, grader_id: str, attempt_id: str) -> GradeSuggestion:
        """Advisory score proposal; applies nothing."""
        async with self._lock:
            self._require_privileged(grader_id)
            attempt = self.get_attempt(attempt_id)
            exam = self.get_exam(attempt.exam_id)
        # Outside the lock: the advisory call must not block mutations
        return await GradingWorkflow.suggest(attempt, exam, self.advisor)

    async def cognitive_insight(self, user_id: str) -> str:
        user = self.get_user(user_id)
        advisor = self.advisor or AdvisoryService()
        return await advisor.summarize(user.name, [r.score for r in user.score_history])

    # ------------------------------------------------------------------ #
    # Scenarios
    # ------------------------------------------------------------------ #

    async def start_scenario(
        self, user_id: str, content_id: str, now: Optional[datetime] = None
    ) -> ScenarioSession:
        async with self._lock:
            content = self._content(content_id)
            if not AccessPolicy.can_access(self._user(user_id), content):
                raise PermissionDeniedError(f"content {content_id} is locked for this user")
            session = ScenarioSession.start(user_id, content, now=now)
            self._scenario_sessions[session.id] = session
            return session.model_copy(deep=True)

    async def choose_scenario_option(self, session_id: str, choice_index: int) -> ScenarioTransition:
        async with self._lock:
            session = self._scenario_sessions.get(session_id)
            if session is None:
                raise NotFoundError("scenario session", session_id)
            return session.choose(self._content(session.content_id), choice_index)

    def get_scenario_session(self, session_id: str) -> ScenarioSession:
        session = self._scenario_sessions.get(session_id)
        if session is None:
            raise NotFoundError("scenario session", session_id)
        return session.model_copy(deep=True)

    # ------------------------------------------------------------------ #
    # Admin
    # ------------------------------------------------------------------ #

    async def broadcast_alert(
        self,
        admin_id: str,
        title: str,
        message: str,
        severity: AlertSeverity = AlertSeverity.LOW,
    ) -> Alert:
        async with self._lock:
            self._require_admin(admin_id)
            alert = Alert(title=title, message=message, severity=severity)
            await self._commit(alerts=[*self._alerts, alert])
        logger.info("Alert broadcast", extra={"alert_id": alert.id, "severity": severity.value})
        return alert.model_copy()

    def analytics(self, viewer_id: str) -> PlatformAnalytics:
        """Aggregate numbers for teachers and admins."""
        self._require_privileged(viewer_id)
        users = [r.user for r in self._users.values()]
        citizens = [u for u in users if u.role == UserRole.CITIZEN]
        graded = [a for a in self._attempts if a.is_graded and a.score is not None]

        buckets: Counter = Counter()
        for u in citizens:
            if u.level == 0:
                continue
            buckets[str(u.level) if u.level < 4 else "4+"] += 1

        return PlatformAnalytics(
            total_users=len(users),
            citizens=len(citizens),
            unassessed_citizens=sum(1 for u in citizens if u.level == 0),
            total_attempts=len(self._attempts),
            graded_attempts=len(graded),
            pending_attempts=len(self._attempts) - len(graded),
            average_score=round(sum(a.score for a in graded) / len(graded), 1) if graded else None,
            active_contents=sum(1 for c in self._contents.values() if c.is_active),
            level_distribution={k: buckets.get(k, 0) for k in ("1", "2", "3", "4+")},
            recent_scores=[a.score for a in graded[-self.RECENT_SCORES:]],
        )
