import tempfile
import unittest
from pathlib import Path
from powschedule.utils.powschedule_config import PowScheduleConfig

class TestPowScheduleConfig(unittest.TestCase):
    def test_defaults(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            config = PowScheduleConfig.load(environ={}, cwd=Path(temp_dir))
        self.assertIsNone(config.dotenv_path)
        self.assertEqual(config.log_level, "INFO")
        self.assertTrue(config.open_output)

    def test_dotenv_in_cwd(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            dotenv_path = Path(temp_dir) / ".env"
            dotenv_path.write_text("POWSCHEDULE_LOG_LEVEL=debug\nPOWSCHEDULE_OPEN_OUTPUT=no\n", encoding="utf-8")
            config = PowScheduleConfig.load(environ={}, cwd=Path(temp_dir))
        self.assertEqual(config.dotenv_path, dotenv_path)
        self.assertEqual(config.log_level, "DEBUG")
        self.assertFalse(config.open_output)

    def test_environment_wins_over_dotenv(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            (Path(temp_dir) / ".env").write_text("POWSCHEDULE_OPEN_OUTPUT=false\n", encoding="utf-8")
            config = PowScheduleConfig.load(environ={"POWSCHEDULE_OPEN_OUTPUT": "1"}, cwd=Path(temp_dir))
        self.assertTrue(config.open_output)

    def test_config_path(self):
        with tempfile.TemporaryDirectory() as config_dir, tempfile.TemporaryDirectory() as cwd:
            (Path(config_dir) / ".env").write_text("POWSCHEDULE_LOG_LEVEL=WARNING\n", encoding="utf-8")
            (Path(cwd) / ".env").write_text("POWSCHEDULE_LOG_LEVEL=ERROR\n", encoding="utf-8")
            config = PowScheduleConfig.load(environ={"POWSCHEDULE_CONFIG_PATH": config_dir}, cwd=Path(cwd))
        self.assertEqual(config.log_level, "WARNING")

    def test_relative_config_path_is_ignored(self):
        with tempfile.TemporaryDirectory() as cwd:
            (Path(cwd) / ".env").write_text("POWSCHEDULE_LOG_LEVEL=ERROR\n", encoding="utf-8")
            with self.assertLogs("powschedule.utils.powschedule_config", level="ERROR"):
                config = PowScheduleConfig.load(environ={"POWSCHEDULE_CONFIG_PATH": "relative/dir"}, cwd=Path(cwd))
        self.assertEqual(config.log_level, "ERROR")

    def test_invalid_values_fall_back_to_defaults(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            with self.assertLogs("powschedule.utils.powschedule_config", level="WARNING"):
                config = PowScheduleConfig.load(
                    environ={"POWSCHEDULE_LOG_LEVEL": "loud", "POWSCHEDULE_OPEN_OUTPUT": "maybe"},
                    cwd=Path(temp_dir),
                )
        self.assertEqual(config.log_level, "INFO")
        self.assertTrue(config.open_output)
