import unittest
from datetime import datetime
from powschedule.schedule.project_file import Day, Duration, ProjectFile, TimeUnit

class TestProjectFile(unittest.TestCase):
    def test_tasks_are_kept_in_outline_order(self):
        # Arrange
        project = ProjectFile()
        stage1 = project.add_task()
        stage2 = project.add_task()

        # Act
        child_a = stage1.add_task()
        child_b = stage1.add_task()
        grandchild = child_a.add_task()
        child_c = stage2.add_task()

        # Assert
        self.assertEqual(project.tasks, [stage1, child_a, grandchild, child_b, stage2, child_c])
        self.assertEqual(project.child_tasks, [stage1, stage2])
        self.assertEqual([t.unique_id for t in (stage1, stage2, child_a, child_b, grandchild, child_c)], [1, 2, 3, 4, 5, 6])

    def test_outline_level_and_number(self):
        project = ProjectFile()
        stage1 = project.add_task()
        stage2 = project.add_task()
        stage2.add_task()
        child = stage2.add_task()
        grandchild = child.add_task()
        self.assertEqual(stage1.outline_level, 1)
        self.assertEqual(child.outline_level, 2)
        self.assertEqual(grandchild.outline_level, 3)
        self.assertEqual(stage2.outline_number, "2")
        self.assertEqual(child.outline_number, "2.2")
        self.assertEqual(grandchild.outline_number, "2.2.1")

    def test_resource_assignment(self):
        project = ProjectFile()
        task = project.add_task()
        resource = project.add_resource()
        assignment = task.add_resource_assignment(resource)
        self.assertIs(assignment.task, task)
        self.assertIs(assignment.resource, resource)
        self.assertEqual(task.resource_assignments, [assignment])
        self.assertEqual(project.resource_assignments, [assignment])
        self.assertEqual(task.resources, [resource])

    def test_start_and_finish_date(self):
        project = ProjectFile()
        self.assertIsNone(project.start_date)
        self.assertIsNone(project.finish_date)
        task1 = project.add_task()
        task1.start = datetime(2021, 3, 1)
        task1.finish = datetime(2021, 3, 5)
        task2 = project.add_task()
        task2.start = datetime(2021, 2, 1)
        task2.finish = datetime(2021, 2, 10)
        project.add_task()
        self.assertEqual(project.start_date, datetime(2021, 2, 1))
        self.assertEqual(project.finish_date, datetime(2021, 3, 5))

    def test_calendar_lookup(self):
        project = ProjectFile()
        calendar = project.add_default_base_calendar()
        calendar.name = "Standard"
        self.assertIsNone(project.default_calendar)
        project.properties.default_calendar_name = "Standard"
        self.assertIs(project.default_calendar, calendar)
        self.assertFalse(calendar.is_working_day(Day.MONDAY))
        self.assertIsNone(calendar.get_calendar_hours(Day.MONDAY))

class TestDuration(unittest.TestCase):
    def test_to_minutes(self):
        self.assertEqual(Duration(2, TimeUnit.DAYS).to_minutes(1440), 2880)
        self.assertEqual(Duration(2, TimeUnit.DAYS).to_minutes(480), 960)
        self.assertEqual(Duration(1.5, TimeUnit.HOURS).to_minutes(480), 90)
        self.assertEqual(Duration(5, TimeUnit.MINUTES).to_minutes(480), 5)
        self.assertEqual(Duration.zero().to_minutes(1440), 0)
