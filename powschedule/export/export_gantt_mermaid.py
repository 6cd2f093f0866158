"""
Export a schedule document as Gantt chart, using the Mermaid library.
https://github.com/mermaid-js/mermaid

Each stage becomes a section. Tasks without a start or finish date cannot be
placed on the time axis and are left out of the chart.
Mermaid cannot show resources, so they are only mentioned in the task label.

PROMPT> python -m powschedule.export.export_gantt_mermaid /path/to/file.dpow gantt.html
"""
import html
from datetime import datetime
from powschedule.schedule.project_file import ProjectFile, Task
from powschedule.export.project_writer import ProjectWriter

class MermaidGanttHTMLWriter(ProjectWriter):
    @staticmethod
    def _escape_mermaid(text: str) -> str:
        """Escape special characters for Mermaid syntax. Replace characters that could break Mermaid syntax."""
        text = text.replace('\n', ' ')
        text = text.replace(':', '\\:')
        text = text.replace('#', '\\#')
        text = text.replace(';', '\\;')
        text = text.replace('(', '\\(')
        text = text.replace(')', '\\)')
        text = text.replace('[', '\\[')
        text = text.replace(']', '\\]')
        text = text.replace('{', '\\{')
        text = text.replace('}', '\\}')
        text = text.replace('|', '\\|')
        text = text.replace('"', '\\"')
        text = text.replace("'", "\\'")
        return text

    @staticmethod
    def _format_date(value: datetime) -> str:
        return value.strftime("%Y-%m-%d %H:%M")

    @staticmethod
    def _task_line(task: Task) -> str | None:
        if task.start is None or task.finish is None:
            return None
        name = task.name or f"Task {task.unique_id}"
        resource_names = [resource.name for resource in task.resources if resource.name]
        if resource_names:
            name = f"{name} - {', '.join(resource_names)}"
        label = MermaidGanttHTMLWriter._escape_mermaid(name)
        start = MermaidGanttHTMLWriter._format_date(task.start)
        if task.duration.duration == 0:
            return f"    {label} :milestone, t{task.unique_id}, {start}, 0d"
        finish = MermaidGanttHTMLWriter._format_date(task.finish)
        return f"    {label} :t{task.unique_id}, {start}, {finish}"

    @staticmethod
    def to_mermaid_gantt(project: ProjectFile) -> str:
        lines: list[str] = [
            "gantt",
            "    dateFormat  YYYY-MM-DD HH:mm",
            "    axisFormat  %d %b %Y",
            "    todayMarker off",
        ]
        for stage_index, stage_task in enumerate(project.child_tasks, start=1):
            section_name = stage_task.name or f"Stage {stage_index}"
            lines.append(f"    section {MermaidGanttHTMLWriter._escape_mermaid(section_name)}")
            for task in [stage_task, *stage_task.child_tasks]:
                line = MermaidGanttHTMLWriter._task_line(task)
                if line is not None:
                    lines.append(line)
        return "\n".join(lines)

    def to_text(self, project: ProjectFile) -> str:
        """A self-contained HTML page with an embedded Mermaid Gantt chart."""
        title = html.escape(project.properties.project_title or "Project schedule")
        mermaid_code = html.escape(self.to_mermaid_gantt(project), quote=False)
        return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <title>{title}</title>
  <script type="module">
    import mermaid from 'https://cdn.jsdelivr.net/npm/mermaid@10/dist/mermaid.esm.min.mjs';
    mermaid.initialize({{
        "startOnLoad": true,
        "theme": "default",
        "gantt": {{
            "fontSize": 14,
            "sectionFontSize": 16
        }}
    }});
  </script>
  <style>
    body {{
        font-family: system-ui, -apple-system, "Segoe UI", Roboto, sans-serif;
        margin: 2rem;
    }}
  </style>
</head>
<body>
<h1>{title}</h1>
<div class="mermaid">
{mermaid_code}
</div>
</body>
</html>
"""

if __name__ == "__main__":
    import logging
    import sys
    from powschedule.dpow.plan_of_work import PlanOfWork
    from powschedule.convert.convertor import convert

    logging.basicConfig(level=logging.INFO)
    project = convert(PlanOfWork.open_json(sys.argv[1]))
    MermaidGanttHTMLWriter().write(project, sys.argv[2])
