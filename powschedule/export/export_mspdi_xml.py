"""
Export a schedule document as Microsoft Project XML (MSPDI).
Opens in MS Project, ProjectLibre and most tools that import MS Project files.

Schema reference:
https://learn.microsoft.com/en-us/office-project/xml-data-interchange/project-elements-and-xml-structure

PROMPT> python -m powschedule.export.export_mspdi_xml /path/to/file.dpow output.xml
"""
import re
from datetime import datetime, time
from decimal import Decimal
from typing import Optional
from xml.etree.ElementTree import Element, SubElement, indent, tostring
from powschedule.schedule.project_file import (
    Duration, ProjectCalendar, ProjectFile, Resource, ResourceAssignment, Task, TaskMode
)
from powschedule.export.project_writer import ProjectWriter

NS = "http://schemas.microsoft.com/project"

# DurationFormat 7 means "days".
DURATION_FORMAT_DAYS = "7"

# Characters that XML 1.0 doesn't allow, not even as character references.
INVALID_XML_CHARS = re.compile(r"[^\t\n\r\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]")

def _se(parent: Element, tag: str, text=None) -> Element:
    """SubElement shorthand. Characters that would make the document malformed are dropped."""
    el = SubElement(parent, tag)
    if text is not None:
        el.text = INVALID_XML_CHARS.sub("", str(text))
    return el

def _flag(value: bool) -> str:
    return "1" if value else "0"

def format_datetime(value: datetime) -> str:
    return value.strftime("%Y-%m-%dT%H:%M:%S")

def format_time(value: time) -> str:
    return value.strftime("%H:%M:%S")

def format_duration(duration: Optional[Duration], minutes_per_day: int) -> str:
    """ISO 8601 style duration used by MSPDI, like 'PT48H0M0S'."""
    if duration is None:
        duration = Duration.zero()
    total_seconds = int(round(duration.to_minutes(minutes_per_day) * 60))
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"PT{hours}H{minutes}M{seconds}S"

def format_cost(cost: Decimal) -> str:
    # MSPDI stores currency in hundredths.
    return format((Decimal(cost) * 100).normalize(), "f")

class MSPDIWriter(ProjectWriter):
    def to_text(self, project: ProjectFile) -> str:
        root = self.build_project(project)
        indent(root, space="  ")
        return tostring(root, encoding="unicode", xml_declaration=True) + "\n"

    def build_project(self, project: ProjectFile) -> Element:
        properties = project.properties
        root = Element("Project")
        root.set("xmlns", NS)

        if properties.name is not None:
            _se(root, "Name", properties.name)
        if properties.project_title is not None:
            _se(root, "Title", properties.project_title)
        if properties.comments is not None:
            _se(root, "Comments", properties.comments)
        _se(root, "ScheduleFromStart", "1")
        if project.start_date is not None:
            _se(root, "StartDate", format_datetime(project.start_date))
        if project.finish_date is not None:
            _se(root, "FinishDate", format_datetime(project.finish_date))
        default_calendar = project.default_calendar
        if default_calendar is not None:
            _se(root, "CalendarUID", default_calendar.unique_id)
        _se(root, "DefaultStartTime", format_time(properties.default_start_time))
        _se(root, "DefaultFinishTime", format_time(properties.default_end_time))
        _se(root, "MinutesPerDay", properties.minutes_per_day)
        _se(root, "MinutesPerWeek", properties.minutes_per_week)
        _se(root, "DaysPerMonth", properties.minutes_per_week // properties.minutes_per_day * 30 // 7)

        calendars_el = _se(root, "Calendars")
        for calendar in project.calendars:
            self._build_calendar(calendars_el, calendar)

        tasks_el = _se(root, "Tasks")
        for task_index, task in enumerate(project.tasks, start=1):
            self._build_task(tasks_el, task, task_index, properties.minutes_per_day)

        resources_el = _se(root, "Resources")
        for resource_index, resource in enumerate(project.resources, start=1):
            self._build_resource(resources_el, resource, resource_index)

        assignments_el = _se(root, "Assignments")
        for assignment in project.resource_assignments:
            self._build_assignment(assignments_el, assignment)
        return root

    @staticmethod
    def _build_calendar(parent: Element, calendar: ProjectCalendar) -> None:
        cal = _se(parent, "Calendar")
        _se(cal, "UID", calendar.unique_id)
        if calendar.name is not None:
            _se(cal, "Name", calendar.name)
        _se(cal, "IsBaseCalendar", "1")
        _se(cal, "BaseCalendarUID", "-1")

        week_days = _se(cal, "WeekDays")
        for day in sorted(calendar.working_days.keys()):
            wd = _se(week_days, "WeekDay")
            _se(wd, "DayType", int(day))
            _se(wd, "DayWorking", _flag(calendar.is_working_day(day)))
            hours = calendar.get_calendar_hours(day)
            if hours is None or not hours.ranges:
                continue
            working_times = _se(wd, "WorkingTimes")
            for date_range in hours.ranges:
                wt = _se(working_times, "WorkingTime")
                _se(wt, "FromTime", format_time(date_range.start.time()))
                # A range ending at midnight of the next day is written as "00:00:00".
                _se(wt, "ToTime", format_time(date_range.end.time()))

    @staticmethod
    def _build_task(parent: Element, task: Task, task_index: int, minutes_per_day: int) -> None:
        t = _se(parent, "Task")
        _se(t, "UID", task.unique_id)
        _se(t, "ID", task_index)
        if task.name is not None:
            _se(t, "Name", task.name)
        _se(t, "Type", "1")  # Fixed duration
        _se(t, "OutlineNumber", task.outline_number)
        _se(t, "OutlineLevel", task.outline_level)
        if task.start is not None:
            _se(t, "Start", format_datetime(task.start))
        if task.finish is not None:
            _se(t, "Finish", format_datetime(task.finish))
        _se(t, "Duration", format_duration(task.duration, minutes_per_day))
        _se(t, "DurationFormat", DURATION_FORMAT_DAYS)
        manual = task.task_mode == TaskMode.MANUALLY_SCHEDULED
        _se(t, "Manual", _flag(manual))
        if manual:
            if task.start is not None:
                _se(t, "ManualStart", format_datetime(task.start))
            if task.finish is not None:
                _se(t, "ManualFinish", format_datetime(task.finish))
            _se(t, "ManualDuration", format_duration(task.manual_duration, minutes_per_day))
        _se(t, "Summary", _flag(task.summary))
        _se(t, "Milestone", _flag(task.milestone))
        _se(t, "IgnoreResourceCalendar", _flag(task.ignore_resource_calendar))
        _se(t, "Cost", format_cost(task.cost))
        if task.deadline is not None:
            _se(t, "Deadline", format_datetime(task.deadline))
        if task.notes is not None:
            _se(t, "Notes", task.notes)

    @staticmethod
    def _build_resource(parent: Element, resource: Resource, resource_index: int) -> None:
        r = _se(parent, "Resource")
        _se(r, "UID", resource.unique_id)
        _se(r, "ID", resource_index)
        if resource.name is not None:
            _se(r, "Name", resource.name)
        _se(r, "Type", "1")  # Work resource
        if resource.email_address is not None:
            _se(r, "EmailAddress", resource.email_address)
        _se(r, "MaxUnits", "1.0")

    @staticmethod
    def _build_assignment(parent: Element, assignment: ResourceAssignment) -> None:
        a = _se(parent, "Assignment")
        _se(a, "UID", assignment.unique_id)
        _se(a, "TaskUID", assignment.task.unique_id)
        _se(a, "ResourceUID", assignment.resource.unique_id)
        if assignment.task.start is not None:
            _se(a, "Start", format_datetime(assignment.task.start))
        if assignment.task.finish is not None:
            _se(a, "Finish", format_datetime(assignment.task.finish))
        _se(a, "Units", "1")

if __name__ == "__main__":
    import logging
    import sys
    from powschedule.dpow.plan_of_work import PlanOfWork
    from powschedule.convert.convertor import convert

    logging.basicConfig(level=logging.INFO)
    project = convert(PlanOfWork.open_json(sys.argv[1]))
    MSPDIWriter().write(project, sys.argv[2])
