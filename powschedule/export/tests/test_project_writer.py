import os
import stat
import tempfile
import unittest
from pathlib import Path
from powschedule.schedule.project_file import ProjectFile
from powschedule.export.project_writer import (
    ProjectWriteError, ProjectWriterUtility, UnsupportedFormatError
)
from powschedule.export.export_mspdi_xml import MSPDIWriter
from powschedule.export.export_gantt_csv import GanttCSVWriter
from powschedule.export.export_gantt_mermaid import MermaidGanttHTMLWriter

class TestProjectWriterUtility(unittest.TestCase):
    def test_writer_from_extension(self):
        f = ProjectWriterUtility.get_project_writer
        self.assertIsInstance(f("plan.xml"), MSPDIWriter)
        self.assertIsInstance(f("plan.XML"), MSPDIWriter)
        self.assertIsInstance(f(Path("out") / "plan.csv"), GanttCSVWriter)
        self.assertIsInstance(f("plan.html"), MermaidGanttHTMLWriter)
        self.assertIsInstance(f("plan.htm"), MermaidGanttHTMLWriter)

    def test_unsupported_extension(self):
        with self.assertRaises(UnsupportedFormatError) as cm:
            ProjectWriterUtility.get_project_writer("plan.mpp")
        self.assertIn(".mpp", str(cm.exception))
        self.assertIsInstance(cm.exception, ValueError)

    def test_missing_extension(self):
        with self.assertRaises(UnsupportedFormatError):
            ProjectWriterUtility.get_project_writer("plan")

class TestProjectWriter(unittest.TestCase):
    def test_write(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "plan.xml"
            MSPDIWriter().write(ProjectFile(), path)
            self.assertTrue(path.is_file())
            self.assertIn("<Project", path.read_text(encoding="utf-8"))
            # No temporary files are left behind.
            self.assertEqual([p.name for p in Path(temp_dir).iterdir()], ["plan.xml"])

    @unittest.skipIf(os.name == "nt", "POSIX file modes")
    def test_write_respects_umask(self):
        old_umask = os.umask(0o022)
        try:
            with tempfile.TemporaryDirectory() as temp_dir:
                path = Path(temp_dir) / "plan.xml"
                MSPDIWriter().write(ProjectFile(), path)
                mode = stat.S_IMODE(path.stat().st_mode)
        finally:
            os.umask(old_umask)
        self.assertEqual(mode, 0o644)

    def test_write_to_missing_directory(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "missing" / "plan.csv"
            with self.assertRaises(ProjectWriteError) as cm:
                GanttCSVWriter().write(ProjectFile(), path)
            self.assertIsInstance(cm.exception.__cause__, OSError)
            self.assertFalse(path.exists())

    def test_reject_invalid_project(self):
        with self.assertRaises(ValueError):
            MSPDIWriter().write("not a project", "plan.xml")
