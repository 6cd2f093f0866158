"""
Settings for the powschedule command line tool.

Resolved in this order:
1. Environment variables.
2. The ".env" file in the directory given by POWSCHEDULE_CONFIG_PATH (must be an absolute path),
   otherwise the ".env" file in the current working directory.
3. Defaults.

PROMPT> python -m powschedule.utils.powschedule_config

PROMPT> POWSCHEDULE_CONFIG_PATH='/Users/alice/git/powschedule' python -m powschedule.utils.powschedule_config
"""
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional
import logging
import os
from dotenv import dotenv_values

logger = logging.getLogger(__name__)

class ConfigKeyEnum(str, Enum):
    CONFIG_PATH = "POWSCHEDULE_CONFIG_PATH"
    LOG_LEVEL = "POWSCHEDULE_LOG_LEVEL"
    OPEN_OUTPUT = "POWSCHEDULE_OPEN_OUTPUT"

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_OPEN_OUTPUT = True

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
TRUE_VALUES = ("1", "true", "yes", "on")
FALSE_VALUES = ("0", "false", "no", "off")

@dataclass(frozen=True)
class PowScheduleConfig:
    """
    Attributes:
        dotenv_path: Optional[Path] - The .env file that was read, if any.
        log_level: str - Logging level name for the command line tool.
        open_output: bool - Open the converted file with the default application when done.
    """
    dotenv_path: Optional[Path]
    log_level: str = DEFAULT_LOG_LEVEL
    open_output: bool = DEFAULT_OPEN_OUTPUT

    @classmethod
    def find_dotenv_path(cls, environ: Mapping[str, str], cwd: Path) -> Optional[Path]:
        config_dir = environ.get(ConfigKeyEnum.CONFIG_PATH.value)
        if config_dir:
            config_dir_path = Path(config_dir)
            if not config_dir_path.is_absolute():
                logger.error(f"{ConfigKeyEnum.CONFIG_PATH.value} must be an absolute path: {config_dir!r}")
            else:
                candidate = config_dir_path / ".env"
                if candidate.is_file():
                    return candidate
                logger.warning(f"No .env file in {ConfigKeyEnum.CONFIG_PATH.value} directory: {config_dir_path}")
        candidate = cwd / ".env"
        if candidate.is_file():
            return candidate
        return None

    @classmethod
    def load(cls, environ: Optional[Mapping[str, str]] = None, cwd: Optional[Path] = None) -> "PowScheduleConfig":
        if environ is None:
            environ = os.environ
        if cwd is None:
            cwd = Path.cwd()

        dotenv_path = cls.find_dotenv_path(environ, cwd)
        values: dict[str, str] = {}
        if dotenv_path is not None:
            logger.debug(f"Loading .env file from: {dotenv_path}")
            # dotenv_values() leaves os.environ untouched.
            for key, value in dotenv_values(dotenv_path=dotenv_path).items():
                if value is not None:
                    values[key] = value
        # Environment variables win over the .env file.
        for key in ConfigKeyEnum:
            env_value = environ.get(key.value)
            if env_value:
                values[key.value] = env_value

        return cls(
            dotenv_path=dotenv_path,
            log_level=cls._parse_log_level(values.get(ConfigKeyEnum.LOG_LEVEL.value)),
            open_output=cls._parse_bool(ConfigKeyEnum.OPEN_OUTPUT, values.get(ConfigKeyEnum.OPEN_OUTPUT.value), DEFAULT_OPEN_OUTPUT),
        )

    @staticmethod
    def _parse_log_level(value: Optional[str]) -> str:
        if value is None:
            return DEFAULT_LOG_LEVEL
        level = value.strip().upper()
        if level not in VALID_LOG_LEVELS:
            logger.warning(f"Invalid {ConfigKeyEnum.LOG_LEVEL.value} {value!r}, using {DEFAULT_LOG_LEVEL}")
            return DEFAULT_LOG_LEVEL
        return level

    @staticmethod
    def _parse_bool(key: ConfigKeyEnum, value: Optional[str], default: bool) -> bool:
        if value is None:
            return default
        text = value.strip().lower()
        if text in TRUE_VALUES:
            return True
        if text in FALSE_VALUES:
            return False
        logger.warning(f"Invalid {key.value} {value!r}, using {default}")
        return default

if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    config = PowScheduleConfig.load()
    print(config)
