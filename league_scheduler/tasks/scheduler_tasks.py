"""
Celery tasks for schedule regeneration.
"""

from datetime import datetime

from league_scheduler.api.schemas import RegenerationResponse, SeasonConfigPayload
from league_scheduler.core.celery_app import celery_app
from league_scheduler.core.errors import ScheduleEngineError
from league_scheduler.core.logging_config import get_logger
from league_scheduler.services.regeneration import build_service

logger = get_logger(__name__)


@celery_app.task(bind=True, name="regenerate_schedule")
def regenerate_schedule_task(self, division_id: str, config_payload: dict):
    """
    Async task to regenerate one division's schedule.

    Args:
        division_id: Division to regenerate
        config_payload: SeasonConfigPayload as JSON

    Returns:
        dict: Serialized RegenerationResponse plus generation time

    Engine errors are returned as an unsuccessful result carrying their code.
    """
    self.update_state(
        state="PROGRESS",
        meta={"status": f"Validating season configuration for division {division_id}..."}
    )
    start_time = datetime.now()
    config = SeasonConfigPayload.model_validate(config_payload).to_config()

    self.update_state(
        state="PROGRESS",
        meta={"status": "Reconciling games with the regenerated season..."}
    )
    try:
        result = build_service(shared=True).regenerate_schedule(division_id, config)
    except ScheduleEngineError as e:
        logger.error("Task failed for division %s: %s", division_id, e)
        return {
            "success": False,
            "error": e.code,
            "message": e.message,
            "division_id": division_id,
        }

    generation_time = (datetime.now() - start_time).total_seconds()
    logger.info("Task regenerated division %s in %.2fs", division_id, generation_time)

    response = RegenerationResponse.from_result(result).model_dump()
    response["success"] = True
    response["generation_time"] = generation_time
    return response
