import logging
from typing import List

from database import ScheduleStore
from schemas import UserSchedule

logger = logging.getLogger(__name__)

# Weekend days (1 and 7) get the longer routine.
_WEEKEND = [
    "7:30 eye drops",
    "7:30 read aloud",
    "9-10 read 60 pages",
    "10-11 outdoors",
    "14-15 piano practice",
    "15:00 write diary",
    "16-17 homework",
    "21:30 bedtime",
]

SAMPLE_SCHEDULES: List[UserSchedule] = [
    UserSchedule(
        name="Waner",
        tasks={
            "1": _WEEKEND,
            "2": ["7:00 eye drops", "7:00 vocabulary", "16-17 piano lesson", "17:00 homework", "21:30 bedtime"],
            "3": ["7:00 eye drops", "7:00 reading", "16:00 outdoors", "17-19 English class", "21:30 bedtime"],
            "4": ["7:00 eye drops", "7:00 vocabulary", "16:00 outdoors", "17-18 school homework", "21:30 bedtime"],
            "5": ["7:00 eye drops", "7:00 reading", "16-17 piano lesson", "19-20 home assignments", "21:30 bedtime"],
            "6": ["7:00 eye drops", "7:00 vocabulary", "17:00 homework", "18:00 tutoring", "21:30 bedtime"],
            "7": _WEEKEND,
        },
    ),
    UserSchedule(
        name="John",
        tasks={
            "1": _WEEKEND,
            "2": ["7:00 eye drops", "16:00 school homework", "17:00 piano lesson", "20:00 tutoring", "21:30 bedtime"],
            "3": ["7:00 eye drops", "16:00 outdoors", "17-18 school homework", "20:00 piano practice", "21:30 bedtime"],
            "4": ["7:00 eye drops", "16:00 outdoors", "17-19 English class", "20-21 homework", "21:30 bedtime"],
            "5": ["7:00 eye drops", "16:00 school homework", "17:00 piano lesson", "19-20 home assignments", "21:30 bedtime"],
            "6": ["7:00 eye drops", "17:00 homework", "18:30 piano practice", "19:30 tutoring", "21:30 bedtime"],
            "7": _WEEKEND,
        },
    ),
]


def seed_sample_data(store: ScheduleStore) -> int:
    """Insert the sample schedules into an empty collection. Returns the number inserted."""
    if store.count() > 0:
        return 0
    inserted = store.insert_many([s.model_copy(deep=True) for s in SAMPLE_SCHEDULES])
    logger.info("Seeded %d sample schedules", inserted)
    return inserted
