from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.orm import Session

from adventure.db.session import get_db
from adventure.auth.models import User
from adventure.core.deps import get_current_user
from adventure.submissions.service import (
    EmptySubmission,
    LevelNotFound,
    StorageError,
    result_to_payload,
    submit,
)

router = APIRouter(prefix="/api", tags=["submission"])


class SubmitRequest(BaseModel):
    language: str
    levelNumber: int
    solution: str = ""


# ======================================================
# SUBMIT SOLUTION
# ======================================================
@router.post("/submit")
def submit_solution(
    body: SubmitRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    try:
        result = submit(db, user.id, body.language, body.levelNumber, body.solution)
    except StorageError:
        raise HTTPException(status_code=500, detail="Could not save your progress, please try again")

    if isinstance(result, LevelNotFound):
        raise HTTPException(status_code=404, detail="Level not found")

    if isinstance(result, EmptySubmission):
        return JSONResponse(status_code=400, content=result_to_payload(result))

    return result_to_payload(result)
