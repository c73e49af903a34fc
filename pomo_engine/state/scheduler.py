"""
Category scheduling rules.

Decides whether the next interval is work, a short break or a long break
purely from the history the repository returns.
"""

from ..errors import NoIntervalsError
from ..logging.config import get_scheduler_logger, log_category_decision
from ..persistence.base import IntervalRepository
from .models import Category

scheduler_logger = get_scheduler_logger(__name__)

# Short-break cycles that must pass before another long break
LONG_BREAK_SPACING = 3


def next_category(repository: IntervalRepository) -> Category:
    """
    Pick the category of the next interval.

    Every break is followed by a pomodoro. After a pomodoro the next break
    is long only when the last three breaks were all short; with fewer than
    three breaks on record it is short.

    Args:
        repository: Read-only source of interval history

    Returns:
        Category for the next interval
    """
    try:
        last = repository.last()
    except NoIntervalsError:
        log_category_decision(scheduler_logger, Category.POMODORO.value, "empty_history")
        return Category.POMODORO

    if last.is_break:
        log_category_decision(
            scheduler_logger,
            Category.POMODORO.value,
            "after_break",
            context={"last_id": last.id, "last_category": last.category.value}
        )
        return Category.POMODORO

    recent_breaks = repository.breaks(LONG_BREAK_SPACING)
    context = {
        "last_id": last.id,
        "recent_breaks": [interval.category.value for interval in recent_breaks],
    }

    if len(recent_breaks) < LONG_BREAK_SPACING:
        log_category_decision(scheduler_logger, Category.SHORT_BREAK.value,
                              "too_few_breaks", context=context)
        return Category.SHORT_BREAK

    if any(interval.category == Category.LONG_BREAK for interval in recent_breaks):
        log_category_decision(scheduler_logger, Category.SHORT_BREAK.value,
                              "recent_long_break", context=context)
        return Category.SHORT_BREAK

    log_category_decision(scheduler_logger, Category.LONG_BREAK.value,
                          "short_break_cycles_complete", context=context)
    return Category.LONG_BREAK
