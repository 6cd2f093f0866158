"""
Pick a schedule writer from the output file extension, and write atomically.

Supported extensions:
- ".xml" Microsoft Project XML (MSPDI)
- ".csv" Gantt chart rows
- ".html" / ".htm" Mermaid Gantt chart page
"""
import logging
import os
import tempfile
from pathlib import Path
from powschedule.schedule.project_file import ProjectFile

logger = logging.getLogger(__name__)

class UnsupportedFormatError(ValueError):
    """Raised when no writer exists for the output file extension."""
    pass

class ProjectWriteError(Exception):
    """Raised when the schedule document cannot be written to disk."""
    pass

class ProjectWriter:
    """Base class. Subclasses render the whole document as text."""
    def to_text(self, project: ProjectFile) -> str:
        raise NotImplementedError()

    def write(self, project: ProjectFile, path: str | Path) -> None:
        if not isinstance(project, ProjectFile):
            raise ValueError("project must be a ProjectFile")
        text = self.to_text(project)
        write_text_atomic(Path(path), text)
        logger.info(f"Wrote {type(self).__name__} output to {path}")

def _current_umask() -> int:
    # There is no way to read the umask without setting it.
    umask = os.umask(0)
    os.umask(umask)
    return umask

def write_text_atomic(path: Path, text: str) -> None:
    """
    Write to a temporary file next to ``path``, then rename it into place.
    On failure no file is left at ``path``.
    """
    temp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", newline="", dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
        ) as f:
            temp_name = f.name
            f.write(text)
        # The temporary file is created owner-only, give the output the usual umask based mode.
        os.chmod(temp_name, 0o666 & ~_current_umask())
        os.replace(temp_name, path)
    except OSError as e:
        if temp_name is not None and os.path.exists(temp_name):
            os.remove(temp_name)
        raise ProjectWriteError(f"Unable to write {path}: {e}") from e

class ProjectWriterUtility:
    @staticmethod
    def get_project_writer(path: str | Path) -> ProjectWriter:
        """
        :raises UnsupportedFormatError: if the extension isn't recognized.
        """
        # Imported here, since the writers import this module for the base class.
        from powschedule.export.export_mspdi_xml import MSPDIWriter
        from powschedule.export.export_gantt_csv import GanttCSVWriter
        from powschedule.export.export_gantt_mermaid import MermaidGanttHTMLWriter

        suffix = Path(path).suffix.lower()
        writers = {
            ".xml": MSPDIWriter,
            ".csv": GanttCSVWriter,
            ".html": MermaidGanttHTMLWriter,
            ".htm": MermaidGanttHTMLWriter,
        }
        writer_class = writers.get(suffix)
        if writer_class is None:
            supported = ", ".join(sorted(writers.keys()))
            raise UnsupportedFormatError(f"Cannot infer output format from extension {suffix!r} of {path}. Supported: {supported}")
        return writer_class()
