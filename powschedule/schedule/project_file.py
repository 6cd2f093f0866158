"""
In-memory schedule document: project properties, calendars, tasks, resources and assignments.

The model mirrors what Microsoft Project stores, so the writers in
``powschedule.export`` can serialize it without further derivation.
"""
from dataclasses import dataclass, field
from datetime import datetime, time
from decimal import Decimal
from enum import Enum
from typing import Optional

class TimeUnit(str, Enum):
    MINUTES = "m"
    HOURS = "h"
    DAYS = "d"

class TaskMode(str, Enum):
    AUTO_SCHEDULED = "auto"
    MANUALLY_SCHEDULED = "manual"

class Day(int, Enum):
    """Day of the week, numbered the way MS Project numbers its DayType."""
    SUNDAY = 1
    MONDAY = 2
    TUESDAY = 3
    WEDNESDAY = 4
    THURSDAY = 5
    FRIDAY = 6
    SATURDAY = 7

@dataclass(frozen=True)
class Duration:
    duration: float
    units: TimeUnit = TimeUnit.DAYS

    @classmethod
    def zero(cls) -> "Duration":
        return cls(0.0, TimeUnit.DAYS)

    def to_minutes(self, minutes_per_day: int) -> float:
        if self.units == TimeUnit.MINUTES:
            return self.duration
        if self.units == TimeUnit.HOURS:
            return self.duration * 60
        return self.duration * minutes_per_day

@dataclass(frozen=True)
class DateRange:
    """Working time range. Only the time-of-day part of start/end is meaningful."""
    start: datetime
    end: datetime

    @property
    def minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)

@dataclass
class ProjectCalendarHours:
    day: Day
    ranges: list[DateRange] = field(default_factory=list)

    def add_range(self, date_range: DateRange) -> None:
        self.ranges.append(date_range)

@dataclass
class ProjectCalendar:
    unique_id: int
    name: Optional[str] = None
    working_days: dict[Day, bool] = field(default_factory=dict)
    hours: dict[Day, ProjectCalendarHours] = field(default_factory=dict)

    def set_working_day(self, day: Day, working: bool) -> None:
        self.working_days[day] = working

    def is_working_day(self, day: Day) -> bool:
        return self.working_days.get(day, False)

    def add_calendar_hours(self, day: Day) -> ProjectCalendarHours:
        hours = ProjectCalendarHours(day=day)
        self.hours[day] = hours
        return hours

    def get_calendar_hours(self, day: Day) -> Optional[ProjectCalendarHours]:
        return self.hours.get(day)

@dataclass
class ProjectProperties:
    name: Optional[str] = None
    project_title: Optional[str] = None
    comments: Optional[str] = None
    default_calendar_name: Optional[str] = None
    default_start_time: time = time(8, 0)
    default_end_time: time = time(17, 0)
    minutes_per_day: int = 480
    minutes_per_week: int = 2400

@dataclass(eq=False)
class Resource:
    unique_id: int
    name: Optional[str] = None
    email_address: Optional[str] = None

@dataclass(eq=False)
class ResourceAssignment:
    unique_id: int
    task: "Task"
    resource: Resource

@dataclass(eq=False)
class Task:
    """
    A node in the task tree. Create tasks via ``ProjectFile.add_task`` or ``Task.add_task``,
    so they get a unique id and are registered on the project file.
    """
    project_file: "ProjectFile" = field(repr=False)
    unique_id: int
    name: Optional[str] = None
    notes: Optional[str] = None
    cost: Decimal = Decimal(0)
    start: Optional[datetime] = None
    finish: Optional[datetime] = None
    deadline: Optional[datetime] = None
    duration: Duration = field(default_factory=Duration.zero)
    manual_duration: Optional[Duration] = None
    summary: bool = False
    milestone: bool = False
    task_mode: TaskMode = TaskMode.AUTO_SCHEDULED
    ignore_resource_calendar: bool = False
    parent_task: Optional["Task"] = field(default=None, repr=False)
    child_tasks: list["Task"] = field(default_factory=list, repr=False)
    resource_assignments: list[ResourceAssignment] = field(default_factory=list, repr=False)

    def add_task(self) -> "Task":
        return self.project_file._create_task(parent=self)

    def add_resource_assignment(self, resource: Resource) -> ResourceAssignment:
        return self.project_file._create_assignment(self, resource)

    @property
    def outline_level(self) -> int:
        if self.parent_task is None:
            return 1
        return self.parent_task.outline_level + 1

    @property
    def outline_number(self) -> str:
        siblings = self.project_file.child_tasks if self.parent_task is None else self.parent_task.child_tasks
        position = str(siblings.index(self) + 1)
        if self.parent_task is None:
            return position
        return f"{self.parent_task.outline_number}.{position}"

    @property
    def resources(self) -> list[Resource]:
        return [assignment.resource for assignment in self.resource_assignments]

@dataclass
class ProjectFile:
    properties: ProjectProperties = field(default_factory=ProjectProperties)
    calendars: list[ProjectCalendar] = field(default_factory=list)
    # All tasks in creation order, which is a pre-order walk of the tree.
    tasks: list[Task] = field(default_factory=list)
    child_tasks: list[Task] = field(default_factory=list)
    resources: list[Resource] = field(default_factory=list)
    resource_assignments: list[ResourceAssignment] = field(default_factory=list)

    def add_task(self) -> Task:
        return self._create_task(parent=None)

    def add_resource(self) -> Resource:
        resource = Resource(unique_id=len(self.resources) + 1)
        self.resources.append(resource)
        return resource

    def add_default_base_calendar(self) -> ProjectCalendar:
        calendar = ProjectCalendar(unique_id=len(self.calendars) + 1)
        self.calendars.append(calendar)
        return calendar

    def get_calendar_by_name(self, name: str) -> Optional[ProjectCalendar]:
        for calendar in self.calendars:
            if calendar.name == name:
                return calendar
        return None

    @property
    def default_calendar(self) -> Optional[ProjectCalendar]:
        if self.properties.default_calendar_name is None:
            return None
        return self.get_calendar_by_name(self.properties.default_calendar_name)

    @property
    def start_date(self) -> Optional[datetime]:
        dates = [t.start for t in self.tasks if t.start is not None]
        return min(dates) if dates else None

    @property
    def finish_date(self) -> Optional[datetime]:
        dates = [t.finish for t in self.tasks if t.finish is not None]
        return max(dates) if dates else None

    def _create_task(self, parent: Optional[Task]) -> Task:
        task = Task(project_file=self, unique_id=len(self.tasks) + 1, parent_task=parent)
        if parent is None:
            self.child_tasks.append(task)
            self.tasks.append(task)
        else:
            # Keep self.tasks in pre-order: insert after the parent's last descendant.
            anchor = parent
            while anchor.child_tasks:
                anchor = anchor.child_tasks[-1]
            parent.child_tasks.append(task)
            self.tasks.insert(self.tasks.index(anchor) + 1, task)
        return task

    def _create_assignment(self, task: Task, resource: Resource) -> ResourceAssignment:
        assignment = ResourceAssignment(
            unique_id=len(self.resource_assignments) + 1,
            task=task,
            resource=resource,
        )
        task.resource_assignments.append(assignment)
        self.resource_assignments.append(assignment)
        return assignment
