"""
Submission orchestrator.

submit() ties the catalog, evaluator, ledger and score aggregator together:

  1. blank text            -> EmptySubmission
  2. unknown level          -> LevelNotFound
  3. evaluator says no      -> Rejected (no writes, hint included)
  4. evaluator says yes     -> ledger upsert + conditional score credit,
                               committed as one transaction -> Accepted

Domain outcomes are returned, never raised. Only storage failures raise,
as StorageError, after the transaction has been rolled back.
"""
from dataclasses import dataclass
from typing import Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from adventure.levels.catalog import LevelNotFoundError, get_level, next_level_number
from adventure.progress.ledger import record_completion
from adventure.progress.scoring import apply_award
from adventure.submissions.evaluator import evaluate


class StorageError(RuntimeError):
    """The database failed while evaluating or recording a submission."""


@dataclass(frozen=True)
class Accepted:
    points: int
    next_level: Optional[int]
    credited: int
    message: str = "Level completed!"
    success: bool = True

    @property
    def first_completion(self) -> bool:
        return self.credited > 0


@dataclass(frozen=True)
class Rejected:
    hint: Optional[str]
    message: str = "Try again!"
    success: bool = False


@dataclass(frozen=True)
class EmptySubmission:
    message: str = "Submission is empty"
    success: bool = False


@dataclass(frozen=True)
class LevelNotFound:
    language: str
    level_number: int
    message: str = "Level not found"
    success: bool = False


SubmissionResult = Union[Accepted, Rejected, EmptySubmission, LevelNotFound]


def submit(
    db: Session,
    user_id: int,
    language: str,
    level_number: int,
    submitted_text: str,
) -> SubmissionResult:
    if not submitted_text or not submitted_text.strip():
        return EmptySubmission()

    try:
        try:
            level = get_level(db, language, level_number)
        except LevelNotFoundError as e:
            return LevelNotFound(language=e.language, level_number=e.level_number)

        if not evaluate(submitted_text, level.solution):
            return Rejected(hint=level.hints)

        # Copy what we need before commit expires the instance
        points = level.points
        lang = level.language

        previous = record_completion(db, user_id, lang, level_number, points)
        credited = apply_award(db, user_id, previous, points)
        next_level = next_level_number(db, lang, level_number)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        print(f"[SUBMIT] storage failure user={user_id} {language}/{level_number}: {exc!r}", flush=True)
        raise StorageError("Could not record submission") from exc

    print(
        f"[SUBMIT] accepted user={user_id} {lang}/{level_number} "
        f"first={previous.newly_completed} credited={credited} next={next_level}",
        flush=True,
    )
    return Accepted(points=points, next_level=next_level, credited=credited)


def result_to_payload(result: SubmissionResult) -> dict:
    """JSON body for POST /api/submit."""
    if isinstance(result, Accepted):
        return {
            "success": True,
            "message": result.message,
            "points": result.points,
            "nextLevel": result.next_level,
        }
    if isinstance(result, Rejected):
        return {"success": False, "message": result.message, "hint": result.hint}
    return {"success": False, "message": result.message}
