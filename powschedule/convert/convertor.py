"""
Convert a dPOW plan of work into a schedule document.

Mapping:
- Every project stage becomes a top level summary milestone task.
- Document sets, asset types, assembly types and space types become children of their stage.
- The responsible contact of each document set job becomes a resource assigned to the document set task.

dPOW has no notion of working hours. The project therefore gets a 24 hour, 7 day
calendar, so durations computed from the date difference match what MS Project shows.

PROMPT> python -m powschedule.convert.convertor /path/to/file.dpow
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, time
from decimal import Decimal
from typing import Optional, Sequence
from uuid import UUID
from powschedule.dpow.plan_of_work import Attribute, Contact, Job, PlanOfWork
from powschedule.schedule.project_file import (
    DateRange, Day, ProjectCalendar, ProjectFile, Resource, Task, TaskMode
)
from powschedule.convert.attributes import (
    date_from_attribute, duration_between, number_from_attribute, string_from_attribute
)

logger = logging.getLogger(__name__)

PROJECT_CALENDAR_NAME = "24 Hour Calendar"

MINUTES_PER_DAY = 1440
MINUTES_PER_WEEK = 10080

def populate_task(
    task: Task,
    name: Optional[str],
    notes: Optional[str],
    attributes: Sequence[Attribute],
    parent: Optional[Task] = None,
) -> None:
    """
    Fill in a task from a dPOW node.

    Without StartDate/EndDate attributes the task inherits the parent's start/finish.
    The deadline is never inherited.
    """
    task.name = name
    # Some dPOW objects have a description, others keep their notes in the attributes.
    task.notes = notes if notes is not None else string_from_attribute(attributes, "Notes")
    task.cost = number_from_attribute(attributes, "Cost", Decimal(0))
    task.start = date_from_attribute(attributes, "StartDate", parent.start if parent is not None else None)
    task.finish = date_from_attribute(attributes, "EndDate", parent.finish if parent is not None else None)
    task.deadline = date_from_attribute(attributes, "StageDeadline", None)
    duration = duration_between(task.start, task.finish)
    task.duration = duration
    task.manual_duration = duration
    # Fixed dates, regardless of the assigned resources' calendars. Otherwise a resource
    # without a calendar makes MS Project shift the task or zero its duration.
    task.task_mode = TaskMode.MANUALLY_SCHEDULED
    task.ignore_resource_calendar = True

def sanitize_resource_name(name: str) -> str:
    """MS Project rejects resource names with square brackets, e.g. the '[Not Assigned]' contact."""
    return name.replace("[", "(").replace("]", ")")

def populate_resource_from_contact(resource: Resource, contact: Contact) -> None:
    # GivenName is frequently missing, fall back on the company name.
    name = contact.given_name if contact.given_name else contact.company_name
    resource.name = sanitize_resource_name(name) if name is not None else None
    resource.email_address = contact.email

def setup_calendar(calendar: ProjectCalendar) -> None:
    """Make every day a working day, with all 24 hours as working time."""
    # Only the time of day is used, the reference date is arbitrary.
    whole_day = DateRange(datetime(2000, 1, 1, 0, 0), datetime(2000, 1, 2, 0, 0))
    calendar.name = PROJECT_CALENDAR_NAME
    for day in Day:
        calendar.set_working_day(day, True)
        hours = calendar.add_calendar_hours(day)
        hours.add_range(whole_day)

@dataclass
class ConversionSession:
    """
    One conversion run. Owns the resource registry, so a contact becomes
    at most one resource, and separate runs never share resources.
    """
    plan: PlanOfWork
    project: ProjectFile = field(default_factory=ProjectFile)
    added_resources: dict[UUID, Resource] = field(default_factory=dict)

    def run(self) -> ProjectFile:
        self._set_project_properties()
        for stage in self.plan.project_stages:
            logger.debug(f"Converting stage {stage.name!r}")
            # Top level summary tasks, all other tasks are children of these.
            stage_task = self.project.add_task()
            populate_task(stage_task, stage.name, stage.description, stage.attributes)
            stage_task.summary = True
            stage_task.milestone = True

            for document_set in stage.documentation_set:
                document_set_task = stage_task.add_task()
                populate_task(document_set_task, document_set.name, document_set.description, document_set.attributes, stage_task)
                # Currently one job per document set, holding the responsible contact.
                for job in document_set.jobs:
                    self.setup_resource_assignment(document_set_task, job)

            deliverables = [*stage.asset_types, *stage.assembly_types, *stage.space_types]
            for deliverable in deliverables:
                populate_task(stage_task.add_task(), deliverable.name, deliverable.description, deliverable.attributes, stage_task)

        logger.info(
            f"Converted {len(self.plan.project_stages)} stages into {len(self.project.tasks)} tasks, "
            f"{len(self.project.resources)} resources, {len(self.project.resource_assignments)} assignments"
        )
        return self.project

    def setup_resource_assignment(self, task: Task, job: Job) -> None:
        """Assign the job's responsible contact to the task, adding the resource on first use."""
        contact_id = job.responsibility.responsible_contact_id
        if contact_id is None:
            return
        resource = self.added_resources.get(contact_id)
        if resource is None:
            contact = self.plan.find_contact(contact_id)
            if contact is None:
                logger.debug(f"No contact with id {contact_id}, task {task.name!r} gets no resource")
                return
            resource = self.project.add_resource()
            populate_resource_from_contact(resource, contact)
            self.added_resources[contact_id] = resource
            logger.debug(f"Added resource {resource.name!r} for contact {contact_id}")
        task.add_resource_assignment(resource)

    def _set_project_properties(self) -> None:
        properties = self.project.properties
        properties.name = self.plan.project.name
        properties.project_title = self.plan.project.name
        properties.comments = self.plan.project.description

        setup_calendar(self.project.add_default_base_calendar())
        properties.default_calendar_name = PROJECT_CALENDAR_NAME

        # The calendar alone is not enough, the scheduling settings must also assume 24 hour days.
        properties.default_start_time = time(0, 0)
        properties.default_end_time = time(0, 0)
        properties.minutes_per_day = MINUTES_PER_DAY
        properties.minutes_per_week = MINUTES_PER_WEEK

def convert(plan: PlanOfWork) -> ProjectFile:
    """Build a new schedule document from a plan of work."""
    if not isinstance(plan, PlanOfWork):
        raise ValueError("plan must be a PlanOfWork")
    return ConversionSession(plan=plan).run()

if __name__ == "__main__":
    import sys
    logging.basicConfig(level=logging.DEBUG)
    project = convert(PlanOfWork.open_json(sys.argv[1]))
    for task in project.tasks:
        indent = "  " * (task.outline_level - 1)
        print(f"{indent}{task.name!r} {task.start} -> {task.finish} ({task.duration.duration:g} days)")
