from models.assignment import Assignment
from models.period import Period
from models.task import Task
from models.teacher import Teacher
from models.school_class import SchoolClass
from models.subject import Subject
from models.conflict import Conflict
from models.snapshot import ScheduleSnapshot

__all__ = [
    "Assignment",
    "Period",
    "Task",
    "Teacher",
    "SchoolClass",
    "Subject",
    "Conflict",
    "ScheduleSnapshot",
]
