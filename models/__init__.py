from models.teacher import Teacher, Role
from models.subject import Subject
from models.school_class import ClassRoom
from models.timeslot import TimeSlot, TimeSlotType
from models.schedule_item import ScheduleItem
from models.leave_request import LeaveRequest, LeaveStatus
from models.substitute_assignment import SubstituteAssignment, SubStatus
from models.school_data import SchoolState

__all__ = [
    "Teacher",
    "Role",
    "Subject",
    "ClassRoom",
    "TimeSlot",
    "TimeSlotType",
    "ScheduleItem",
    "LeaveRequest",
    "LeaveStatus",
    "SubstituteAssignment",
    "SubStatus",
    "SchoolState",
]
