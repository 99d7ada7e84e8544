"""Time-of-day and day-of-week listening patterns"""
import logging
from typing import Iterable, List

from wrapped_insights.models.snapshot import ActivityEvent, ActivityKind
from wrapped_insights.models.summary import DayBucket, HourBucket, ListeningPattern, Persona

logger = logging.getLogger(__name__)

# (start hour inclusive, end hour exclusive, persona); contiguous over 0-24
PERSONA_RANGES = (
    (0, 6, Persona.NIGHT_OWL),
    (6, 12, Persona.EARLY_BIRD),
    (12, 18, Persona.AFTERNOON_LISTENER),
    (18, 24, Persona.EVENING_VIBES),
)

# Monday first, matching datetime.weekday()
WEEKDAYS = ("MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY", "SUNDAY")


def persona_for_hour(hour: int) -> Persona:
    """Map a peak hour (0-23) to its listening persona"""
    for start, end, persona in PERSONA_RANGES:
        if start <= hour < end:
            return persona
    raise ValueError(f"Hour out of range: {hour}")


def format_hour(hour: int) -> str:
    if hour == 0:
        return "12 AM"
    if hour < 12:
        return f"{hour} AM"
    if hour == 12:
        return "12 PM"
    return f"{hour - 12} PM"


def _peak(buckets) -> int:
    # max() keeps the first of equal counts, i.e. the earliest bucket
    return max(range(len(buckets)), key=lambda i: buckets[i].play_count)


class ListeningPatternAnalyzer:
    """Buckets PLAY events by hour and weekday and classifies a persona"""

    def analyze(self, events: Iterable[ActivityEvent]) -> ListeningPattern:
        """
        Analyze listening patterns from the activity log.

        Only PLAY events are considered; hours and weekdays are taken from
        the event timestamp as given. With no plays, returns has_data False
        and no peak or persona.
        """
        plays: List[ActivityEvent] = [e for e in events if e.kind == ActivityKind.PLAY]
        if not plays:
            logger.debug("No play events, listening pattern unavailable")
            return ListeningPattern(has_data=False)

        hours = [HourBucket(hour=h, label=format_hour(h)) for h in range(24)]
        days = [DayBucket(day=name, label=name.title()) for name in WEEKDAYS]

        for event in plays:
            duration = max(0, event.play_duration_ms or 0)
            hour = hours[event.timestamp.hour]
            hour.play_count += 1
            hour.listening_ms += duration
            day = days[event.timestamp.weekday()]
            day.play_count += 1
            day.listening_ms += duration

        peak_hour = _peak(hours)
        peak_day = days[_peak(days)]
        pattern = ListeningPattern(
            has_data=True,
            total_plays=len(plays),
            peak_hour=peak_hour,
            peak_hour_label=format_hour(peak_hour),
            peak_day=peak_day.day,
            peak_day_label=peak_day.label,
            persona=persona_for_hour(peak_hour),
            hour_distribution=hours,
            day_distribution=days
        )
        logger.debug(f"Peak hour {peak_hour}, peak day {peak_day.day}, persona {pattern.persona.value}")
        return pattern
