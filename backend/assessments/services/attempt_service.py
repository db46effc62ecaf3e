"""
Attempt lifecycle: start, save answer, submit.

Each mutation runs in one transaction and locks the rows it reads, so two
concurrent starts for the same user and test cannot both insert, and a save
racing a submit sees a consistent status. The partial unique constraint on
Attempt backs the start path at the database level.
"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Dict, List, Optional, Sequence

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone

from ..access import ensure_same_organization, require_not_suspended
from ..error_codes import ErrorCodes
from ..errors import AuthorizationError, InvalidStateError, NotFoundError, ValidationError
from ..models import Attempt, AttemptAnswer, Test, UserAccount
from .catalog import get_test, load_questions
from .scoring import (
    CORRECT, INCORRECT, UNANSWERED, classify_answer, normalize_selection, score_answers,
)

logger = logging.getLogger(__name__)


@dataclass
class StartResult:
    attempt: Attempt
    created: bool
    force_submitted_id: Optional[int] = None


@dataclass
class SubmitResult:
    attempt: Attempt
    is_late: bool


def _grace_seconds() -> int:
    return getattr(settings, 'ASSESSMENT_SETTINGS', {}).get('SUBMIT_GRACE_SECONDS', 30)


def _answers_by_question(attempt: Attempt) -> Dict[int, List[int]]:
    return {
        answer.question_id: answer.selected_options
        for answer in AttemptAnswer.objects.filter(attempt=attempt)
    }


def _finalize(attempt: Attempt, test: Test, now) -> Attempt:
    """Score `attempt` from its saved answers and move it to submitted."""
    result = score_answers(
        question_ids=test.question_ids or [],
        questions_by_id=load_questions(test.question_ids or []),
        answers_by_question=_answers_by_question(attempt),
        total_marks=test.total_marks,
        negative_marking=test.negative_marking,
    )
    attempt.correct = result.correct
    attempt.incorrect = result.incorrect
    attempt.unanswered = result.unanswered
    attempt.score = result.score
    attempt.submitted_at = now
    attempt.status = Attempt.STATUS_SUBMITTED
    attempt.save(update_fields=['correct', 'incorrect', 'unanswered', 'score', 'submitted_at', 'status'])
    return attempt


def _lock_owned_attempt(caller: UserAccount, attempt_id) -> Attempt:
    """Fetch the attempt FOR UPDATE and check ownership and state."""
    try:
        attempt = Attempt.objects.select_for_update(of=('self',)).select_related('test').get(id=attempt_id)
    except (Attempt.DoesNotExist, ValueError, TypeError):
        raise NotFoundError(f"Attempt {attempt_id} not found", resource_type="attempt")

    if attempt.user_id != caller.user_id:
        raise AuthorizationError("You can only modify your own attempt")

    if attempt.status != Attempt.STATUS_IN_PROGRESS:
        raise InvalidStateError(
            "Attempt has already been submitted",
            code=ErrorCodes.ATTEMPT_ALREADY_SUBMITTED,
            details={"attempt_id": attempt.id}
        )
    return attempt


def start_attempt(caller: UserAccount, test_id, force_new: bool = False) -> StartResult:
    """
    Resume the caller's in-progress attempt at `test_id`, or create a new one.

    With force_new, a stale in-progress attempt is scored from whatever answers
    it holds and submitted before the fresh attempt is created.
    """
    test = get_test(test_id)
    ensure_same_organization(caller, test.organization_id)

    if test.status != Test.STATUS_PUBLISHED:
        raise InvalidStateError(
            "Test is not open for attempts",
            code=ErrorCodes.TEST_NOT_PUBLISHED,
            details={"test_id": test.id, "status": test.status}
        )

    require_not_suspended(caller)

    if caller.role == UserAccount.ROLE_STUDENT and not test.is_open_to_batch(caller.batch_id):
        raise AuthorizationError("This test is not assigned to your batch")

    with transaction.atomic():
        # Serialises concurrent starts by the same user
        UserAccount.objects.select_for_update().filter(user_id=caller.user_id).first()

        in_progress = (
            Attempt.objects.select_for_update()
            .filter(user=caller, test=test, status=Attempt.STATUS_IN_PROGRESS)
            .first()
        )

        force_submitted_id = None
        if in_progress is not None:
            if not force_new:
                logger.info(f"Resuming attempt {in_progress.id} for user {caller.user_id} on test {test.id}")
                return StartResult(attempt=in_progress, created=False)

            _finalize(in_progress, test, timezone.now())
            force_submitted_id = in_progress.id
            logger.info(
                f"Force-submitted stale attempt {in_progress.id} for user {caller.user_id} "
                f"(score {in_progress.score})"
            )

        question_count = test.question_count
        try:
            with transaction.atomic():
                attempt = Attempt.objects.create(
                    user=caller,
                    test=test,
                    status=Attempt.STATUS_IN_PROGRESS,
                    score=0,
                    total_questions=question_count,
                    correct=0,
                    incorrect=0,
                    unanswered=question_count,
                    started_at=timezone.now(),
                )
        except IntegrityError:
            logger.warning(f"Concurrent start detected for user {caller.user_id} on test {test.id}")
            raise InvalidStateError(
                "Another attempt for this test was started at the same time",
                code=ErrorCodes.ATTEMPT_START_CONFLICT,
                details={"test_id": test.id}
            )

    logger.info(f"Started attempt {attempt.id} for user {caller.user_id} on test {test.id}")
    return StartResult(attempt=attempt, created=True, force_submitted_id=force_submitted_id)


def save_answer(caller: UserAccount, attempt_id, question_id, selected_options: Sequence[int]) -> AttemptAnswer:
    """
    Upsert the caller's selection for one question. Nothing is written unless
    every index is valid; the score is not touched until submission.
    """
    with transaction.atomic():
        attempt = _lock_owned_attempt(caller, attempt_id)
        test = attempt.test

        try:
            question_id = int(question_id)
        except (TypeError, ValueError):
            raise ValidationError("question_id must be an integer", field="question_id")

        if question_id not in {int(qid) for qid in (test.question_ids or [])}:
            raise ValidationError(
                f"Question {question_id} is not part of this test",
                field="question_id",
                code=ErrorCodes.QUESTION_NOT_IN_TEST
            )

        question = load_questions([question_id]).get(question_id)
        if question is None:
            raise NotFoundError(f"Question {question_id} not found", resource_type="question")

        option_count = question.option_count
        bad = [i for i in selected_options if isinstance(i, bool) or not isinstance(i, int) or not 0 <= i < option_count]
        if bad:
            raise ValidationError(
                f"Selected option index out of range (question has {option_count} options)",
                field="selected_options",
                code=ErrorCodes.INVALID_OPTION_INDEX,
                details={"invalid_indices": bad, "option_count": option_count}
            )

        answer, _ = AttemptAnswer.objects.update_or_create(
            attempt=attempt,
            question=question,
            defaults={
                'selected_options': normalize_selection(selected_options),
                'answered_at': timezone.now(),
            }
        )

    logger.debug(f"Saved answer for attempt {attempt.id} question {question_id}")
    return answer


def submit_attempt(caller: UserAccount, attempt_id) -> SubmitResult:
    """
    Score and submit. Late submissions are accepted; lateness is only reported.
    """
    with transaction.atomic():
        attempt = _lock_owned_attempt(caller, attempt_id)
        now = timezone.now()

        allowed = timedelta(minutes=attempt.test.duration_minutes, seconds=_grace_seconds())
        is_late = (now - attempt.started_at) >= allowed

        _finalize(attempt, attempt.test, now)

    if is_late:
        logger.warning(
            f"Late submission accepted for attempt {attempt.id} "
            f"({int((now - attempt.started_at).total_seconds())}s elapsed, "
            f"limit {attempt.test.duration_minutes}m + {_grace_seconds()}s)"
        )
    logger.info(
        f"Submitted attempt {attempt.id} for user {caller.user_id}: score={attempt.score} "
        f"correct={attempt.correct} incorrect={attempt.incorrect} unanswered={attempt.unanswered}"
    )
    return SubmitResult(attempt=attempt, is_late=is_late)


def get_attempt(caller: UserAccount, attempt_id, with_answers: bool = False) -> Attempt:
    """Read one attempt; owners and same-organization admins only."""
    queryset = Attempt.objects.select_related('test', 'user')
    if with_answers:
        queryset = queryset.prefetch_related('answers')
    try:
        attempt = queryset.get(id=attempt_id)
    except (Attempt.DoesNotExist, ValueError, TypeError):
        raise NotFoundError(f"Attempt {attempt_id} not found", resource_type="attempt")

    if attempt.user_id != caller.user_id:
        ensure_same_organization(caller, attempt.user.organization_id)
        if not caller.is_admin:
            raise AuthorizationError("You can only view your own attempt")
    return attempt


def get_attempt_with_details(caller: UserAccount, attempt_id) -> Attempt:
    return get_attempt(caller, attempt_id, with_answers=True)


def get_attempt_for_user_and_test(user: UserAccount, test_id) -> Optional[Attempt]:
    """Resume check: the in-progress attempt if any, else the latest one, else None."""
    attempts = Attempt.objects.filter(user=user, test_id=test_id).select_related('test')
    in_progress = attempts.filter(status=Attempt.STATUS_IN_PROGRESS).first()
    if in_progress is not None:
        return in_progress
    return attempts.order_by('-started_at', '-id').first()


def list_attempts_for_user(user: UserAccount):
    return Attempt.objects.filter(user=user).select_related('test').order_by('-started_at', '-id')


def get_attempt_breakdown(caller: UserAccount, attempt_id) -> dict:
    """
    Per-question outcome rows and per-subject totals for a submitted attempt.
    Empty while the answer key is unpublished.
    """
    attempt = get_attempt(caller, attempt_id)
    if not attempt.is_submitted:
        raise InvalidStateError(
            "Breakdown is available after submission",
            code=ErrorCodes.ATTEMPT_NOT_SUBMITTED,
            details={"attempt_id": attempt.id}
        )

    test = attempt.test
    breakdown = {
        'attempt_id': attempt.id,
        'test_id': test.id,
        'answer_key_published': test.answer_key_published,
        'questions': [],
        'subjects': [],
    }
    if not test.answer_key_published:
        return breakdown

    questions = load_questions(test.question_ids or [])
    answers = _answers_by_question(attempt)
    subjects = {}

    for position, question_id in enumerate(test.question_ids or [], start=1):
        question = questions.get(int(question_id))
        if question is None:
            continue

        selected = answers.get(question.id, [])
        outcome = classify_answer(selected, question.correct_options)

        counts = subjects.setdefault(question.subject, {
            'subject': question.subject, CORRECT: 0, INCORRECT: 0, UNANSWERED: 0, 'total': 0,
        })
        counts[outcome] += 1
        counts['total'] += 1

        breakdown['questions'].append({
            'position': position,
            'question_id': question.id,
            'text': question.text,
            'subject': question.subject,
            'selected_options': selected,
            'correct_options': question.correct_options,
            'outcome': outcome,
            'explanation': question.explanation,
        })

    breakdown['subjects'] = list(subjects.values())
    return breakdown
