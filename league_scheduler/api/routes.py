"""
API routes for season generation, regeneration and conflict reporting.
"""

import threading
from datetime import datetime
from typing import Optional

from celery.result import AsyncResult
from fastapi import APIRouter, Depends, HTTPException

from league_scheduler.api.schemas import (
    ConflictCheckRequest, ConflictCheckResponse, LocationConflictResponse, PreviewResponse,
    ProgressResponse, RegenerationResponse, SeasonConfigPayload, SlotResponse,
    ValidationResponse, WeekSummaryResponse
)
from league_scheduler.core.celery_app import celery_app
from league_scheduler.services import conflicts, config_validator
from league_scheduler.services.regeneration import ScheduleRegenerationService, build_service
from league_scheduler.tasks.scheduler_tasks import regenerate_schedule_task

router = APIRouter(prefix="/api", tags=["schedule"])

_service: Optional[ScheduleRegenerationService] = None
_service_lock = threading.Lock()


def get_service() -> ScheduleRegenerationService:
    """Process-wide regeneration service, built once on first use."""
    global _service
    with _service_lock:
        if _service is None:
            _service = build_service()
        return _service


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}


@router.post("/schedule/validate", response_model=ValidationResponse)
async def validate_config(payload: SeasonConfigPayload):
    """Check a season configuration without generating anything."""
    result = config_validator.validate(payload.to_config())
    return ValidationResponse.from_result(result)


@router.post("/schedule/preview", response_model=PreviewResponse)
def preview_schedule(
    payload: SeasonConfigPayload,
    include_byes: bool = False,
    service: ScheduleRegenerationService = Depends(get_service),
):
    """
    Generate the season's weekly slots without persisting anything.

    With include_byes, skipped weeks are returned as unnumbered bye markers.
    """
    slots = service.preview(payload.to_config(), include_byes=include_byes)
    return PreviewResponse(
        total_weeks=sum(1 for slot in slots if not slot.is_bye),
        slots=[SlotResponse.from_slot(slot) for slot in slots],
    )


@router.post("/schedule/conflicts", response_model=ConflictCheckResponse)
async def check_conflicts(request: ConflictCheckRequest):
    """Report every pair of games double-booking a location."""
    found = conflicts.detect_conflicts([game.to_game() for game in request.games])
    return ConflictCheckResponse(
        total_conflicts=len(found),
        conflicts=[LocationConflictResponse.from_conflict(c) for c in found],
    )


@router.post("/divisions/{division_id}/schedule/regenerate", response_model=RegenerationResponse)
def regenerate_schedule(
    division_id: str,
    payload: SeasonConfigPayload,
    service: ScheduleRegenerationService = Depends(get_service),
):
    """Regenerate and persist a division's schedule."""
    result = service.regenerate_schedule(division_id, payload.to_config())
    return RegenerationResponse.from_result(result)


@router.post("/divisions/{division_id}/schedule/regenerate/async")
async def regenerate_schedule_async(division_id: str, payload: SeasonConfigPayload):
    """
    Start async regeneration for a division.

    Returns:
        dict: Task ID for polling status
    """
    try:
        task = regenerate_schedule_task.delay(division_id, payload.model_dump(mode="json"))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to start task: {str(e)}")

    return {
        "task_id": task.id,
        "status": "PENDING",
        "message": f"Schedule regeneration started for division {division_id}"
    }


@router.get("/schedule/status/{task_id}")
async def get_schedule_status(task_id: str):
    """
    Get status of an async regeneration task.

    Args:
        task_id: Celery task ID
    """
    try:
        task_result = AsyncResult(task_id, app=celery_app)
        state = task_result.state
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to get task status: {str(e)}")

    if state == "PENDING":
        return {"task_id": task_id, "status": "PENDING", "message": "Task is waiting to start..."}
    if state == "PROGRESS":
        info = task_result.info or {}
        return {"task_id": task_id, "status": "PROGRESS", "message": info.get("status", "Processing...")}
    if state == "SUCCESS":
        return {"task_id": task_id, "status": "SUCCESS", "result": task_result.result}
    if state == "FAILURE":
        return {"task_id": task_id, "status": "FAILURE", "message": str(task_result.info)}
    return {"task_id": task_id, "status": state, "message": f"Task state: {state}"}


@router.post("/divisions/{division_id}/schedule/progress", response_model=ProgressResponse)
def schedule_progress(
    division_id: str,
    payload: SeasonConfigPayload,
    service: ScheduleRegenerationService = Depends(get_service),
):
    """Week-by-week status of a division's schedule."""
    progress = service.progress(division_id, payload.to_config())
    return ProgressResponse(
        division_id=division_id,
        total_weeks=progress.total_weeks,
        scheduled_weeks=progress.scheduled_weeks,
        current_week=progress.current_week,
        percent_scheduled=progress.percent_scheduled,
        status=progress.status.value,
        weeks=[
            WeekSummaryResponse(
                week_number=week.week_number,
                label=week.label,
                date=week.date.isoformat(),
                is_playoff=week.is_playoff,
                status=week.status.value,
                game_count=week.game_count,
                is_current=week.is_current,
            )
            for week in progress.weeks
        ],
    )
