"""Plan status transitions driven by today's tasks and sessions."""
from datetime import date
from typing import Sequence

from loguru import logger

from study_rounds.models import DailyTask, PlanStatus, StudyPlan, StudySession
from study_rounds.plans import complete, complete_today, is_overdue, reset_today_completion

STATUS_MESSAGES = {
    PlanStatus.COMPLETED: "Plan completed",
    PlanStatus.COMPLETED_TODAY: "Today's tasks done",
    PlanStatus.PAUSED: "Paused",
    PlanStatus.ACTIVE: "Studying",
}
OVERDUE_MESSAGE = "Overdue"
UNKNOWN_MESSAGE = "Unknown"


def update_status(
    plan: StudyPlan,
    todays_tasks: Sequence[DailyTask],
    todays_sessions: Sequence[StudySession],
    all_rounds_complete: bool,
    today: date,
) -> StudyPlan:
    """Apply the first matching transition rule and return the resulting plan.

    completed is terminal. A paused plan is never resumed here.
    """
    if plan.status is PlanStatus.COMPLETED:
        return plan

    if all_rounds_complete:
        logger.info("Plan {} completed all rounds", plan.id)
        return complete(plan)

    if plan.status is PlanStatus.COMPLETED_TODAY:
        if any(task.is_future(today) for task in todays_tasks):
            return reset_today_completion(plan)
        return plan

    if plan.status is PlanStatus.PAUSED:
        return plan

    due_today = [task for task in todays_tasks if task.is_today(today)]
    if due_today:
        required = sum(task.units for task in due_today)
        done = sum(s.units_completed for s in todays_sessions)
        if done >= required:
            logger.debug("Plan {} met today's quota ({}/{})", plan.id, done, required)
            return complete_today(plan, today)

    return plan


def can_study(plan: StudyPlan, today: date) -> bool:
    if plan.status in (PlanStatus.PAUSED, PlanStatus.COMPLETED):
        return False
    return not is_overdue(plan, today)


def generate_status_message(plan: StudyPlan, today: date) -> str:
    if plan.status in (PlanStatus.COMPLETED, PlanStatus.COMPLETED_TODAY, PlanStatus.PAUSED):
        return STATUS_MESSAGES[plan.status]
    if is_overdue(plan, today):
        return OVERDUE_MESSAGE
    return STATUS_MESSAGES.get(plan.status, UNKNOWN_MESSAGE)
