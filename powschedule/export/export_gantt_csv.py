"""
CSV serialization of the gantt chart data.

This module uses pandas to generate CSV output. The separator is a comma,
and fields containing special characters (like commas or newlines) are
quoted according to standard CSV conventions.

One row per task, in outline order. Calendars aren't stored in the CSV file,
use the XML export when the schedule must open in MS Project.

PROMPT> python -m powschedule.export.export_gantt_csv /path/to/file.dpow gantt.csv
"""
from datetime import datetime
from typing import Optional
import pandas as pd
from powschedule.schedule.project_file import ProjectFile, Task
from powschedule.export.project_writer import ProjectWriter

COLUMN_NAMES = [
    "task_id",
    "task_name",
    "parent_task_id",
    "outline_level",
    "start",
    "finish",
    "deadline",
    "duration_days",
    "cost",
    "summary",
    "milestone",
    "resources",
    "notes",
]

class GanttCSVWriter(ProjectWriter):
    @staticmethod
    def _format_date(value: Optional[datetime]) -> str:
        if value is None:
            return ""
        return value.strftime("%Y-%m-%dT%H:%M:%S")

    @staticmethod
    def _row(task: Task) -> dict[str, str]:
        resource_names = [resource.name or "" for resource in task.resources]
        parent_id = "" if task.parent_task is None else str(task.parent_task.unique_id)
        return {
            "task_id": str(task.unique_id),
            "task_name": task.name or "",
            "parent_task_id": parent_id,
            "outline_level": str(task.outline_level),
            "start": GanttCSVWriter._format_date(task.start),
            "finish": GanttCSVWriter._format_date(task.finish),
            "deadline": GanttCSVWriter._format_date(task.deadline),
            "duration_days": f"{task.duration.duration:g}",
            "cost": format(task.cost, "f"),
            "summary": "1" if task.summary else "0",
            "milestone": "1" if task.milestone else "0",
            "resources": ", ".join(resource_names),
            "notes": task.notes or "",
        }

    def to_text(self, project: ProjectFile) -> str:
        data_rows = [self._row(task) for task in project.tasks]
        df = pd.DataFrame(data_rows, columns=COLUMN_NAMES)
        return df.to_csv(sep=',', index=False, lineterminator='\n')

if __name__ == "__main__":
    import logging
    import sys
    from powschedule.dpow.plan_of_work import PlanOfWork
    from powschedule.convert.convertor import convert

    logging.basicConfig(level=logging.INFO)
    project = convert(PlanOfWork.open_json(sys.argv[1]))
    GanttCSVWriter().write(project, sys.argv[2])
