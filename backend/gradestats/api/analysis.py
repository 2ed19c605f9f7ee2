"""
Analysis API: create, list, get, update, delete. All scoped by current user id;
another user's record is answered with 404, same as a missing one.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from gradestats.config import Settings
from gradestats.database import get_db
from gradestats.models.analysis import Analysis
from gradestats.schemas.auth import MessageResponse
from gradestats.schemas.analysis import AnalysisCreateRequest, AnalysisUpdateRequest, AnalysisResponse
from gradestats.services.auth import TokenPayload
from gradestats.api.deps import get_current_user, settings_dep, internal_error

router = APIRouter(prefix="/analysis", tags=["analysis"])
logger = logging.getLogger(__name__)


def _owned(db: Session, analysis_id: int, user_id: int) -> Analysis:
    """Return the analysis if it exists and belongs to user_id; else 404."""
    row = db.query(Analysis).filter(
        Analysis.id == analysis_id,
        Analysis.id_user == user_id,
    ).first()
    if not row:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Analysis not found")
    return row


@router.post("", response_model=AnalysisResponse, status_code=status.HTTP_201_CREATED)
def create_analysis(
    data: AnalysisCreateRequest,
    current_user: TokenPayload = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(settings_dep),
):
    """Create an analysis owned by the caller; any id_user in the body is ignored."""
    try:
        row = Analysis(**data.model_dump(), id_user=current_user.id)
        db.add(row)
        db.commit()
        db.refresh(row)
    except Exception as e:
        db.rollback()
        logger.exception("Create analysis failed: %s", e)
        raise internal_error(settings, "Error creating analysis", e)
    logger.info("Analysis id=%s created for user id=%s", row.id, current_user.id)
    return AnalysisResponse.model_validate(row)


@router.get("", response_model=list[AnalysisResponse])
def list_analyses(
    current_user: TokenPayload = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(settings_dep),
):
    """List the caller's analyses."""
    try:
        rows = db.query(Analysis).filter(Analysis.id_user == current_user.id).order_by(Analysis.id).all()
    except Exception as e:
        logger.exception("List analyses failed: %s", e)
        raise internal_error(settings, "Error fetching analyses", e)
    return [AnalysisResponse.model_validate(r) for r in rows]


@router.get("/{analysis_id}", response_model=AnalysisResponse)
def get_analysis(
    analysis_id: int,
    current_user: TokenPayload = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(settings_dep),
):
    try:
        row = _owned(db, analysis_id, current_user.id)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Get analysis %s failed: %s", analysis_id, e)
        raise internal_error(settings, "Error fetching analysis", e)
    return AnalysisResponse.model_validate(row)


@router.put("/{analysis_id}", response_model=MessageResponse)
def update_analysis(
    analysis_id: int,
    data: AnalysisUpdateRequest,
    current_user: TokenPayload = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(settings_dep),
):
    """Write only the statistic fields present in the body."""
    try:
        row = _owned(db, analysis_id, current_user.id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(row, field, value)
        db.commit()
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception("Update analysis %s failed: %s", analysis_id, e)
        raise internal_error(settings, "Error updating analysis", e)
    return MessageResponse(message="Analysis updated successfully")


@router.delete("/{analysis_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_analysis(
    analysis_id: int,
    current_user: TokenPayload = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(settings_dep),
):
    try:
        row = _owned(db, analysis_id, current_user.id)
        db.delete(row)
        db.commit()
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception("Delete analysis %s failed: %s", analysis_id, e)
        raise internal_error(settings, "Error deleting analysis", e)
    logger.info("Analysis id=%s deleted by user id=%s", analysis_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
