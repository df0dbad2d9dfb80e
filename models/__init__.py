from models.timeslot import (
    TimeRange,
    TimeSlot,
    PlannerInputError,
    InvalidDayCodeError,
    InvalidTimeError,
)
from models.course import Course
from models.section import Meeting, Section
from models.preferences import (
    Preferences,
    ProtectedBlock,
    FridayPreference,
    DensityPreference,
)
from models.requirement import RequirementGroupInput
from models.plan_request import PlanRequest

__all__ = [
    "TimeRange",
    "TimeSlot",
    "PlannerInputError",
    "InvalidDayCodeError",
    "InvalidTimeError",
    "Course",
    "Meeting",
    "Section",
    "Preferences",
    "ProtectedBlock",
    "FridayPreference",
    "DensityPreference",
    "RequirementGroupInput",
    "PlanRequest",
]
