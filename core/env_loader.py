"""
Unified Environment Variable Loader for the SCORM player project
Loads variables from a single .env file at the project root on top of the process environment
"""

import os
import logging
from pathlib import Path
from typing import Optional, Any

logger = logging.getLogger(__name__)


class EnvironmentLoader:
    """
    Centralized environment variable loader that:
    1. Loads variables from a single .env file
    2. Provides typed getters with fallback values
    3. Validates required variables
    """

    def __init__(self, env_file_path: Optional[str] = None):
        """
        Initialize the environment loader

        Args:
            env_file_path: Path to the .env file. If None, will look for .env in project root
        """
        if env_file_path is None:
            # Project root is where manage.py is located
            project_root = Path(__file__).resolve().parent.parent
            env_file_path = project_root / '.env'

        self.env_file_path = Path(env_file_path)
        self.loaded_variables = {}
        self._load_environment_variables()

    def _load_environment_variables(self):
        """Load environment variables from the .env file"""
        if not self.env_file_path.exists():
            logger.debug(f"Environment file not found: {self.env_file_path}, using system environment only")
            return

        with open(self.env_file_path, 'r', encoding='utf-8') as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()

                # Skip empty lines and comments
                if not line or line.startswith('#'):
                    continue

                if '=' not in line:
                    logger.warning(f"Invalid line format in {self.env_file_path}:{line_num}: {line}")
                    continue

                key, value = line.split('=', 1)
                key = key.strip()
                value = value.strip()

                # Remove quotes if present
                if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
                    value = value[1:-1]

                # Variables already set in the process environment win over the file
                if key in os.environ:
                    continue
                os.environ[key] = value
                self.loaded_variables[key] = value

        logger.info(f"Loaded {len(self.loaded_variables)} environment variables from {self.env_file_path}")

    def get(self, key: str, default: Any = None, required: bool = False) -> Any:
        """
        Get an environment variable with optional default and validation

        Args:
            key: Environment variable name
            default: Default value if not found
            required: If True, raise error if variable is not set

        Returns:
            Environment variable value or default
        """
        value = os.environ.get(key, default)

        if required and not value:
            raise ValueError(f"Required environment variable {key} is not set")

        return value

    def get_bool(self, key: str, default: bool = False) -> bool:
        """Get a boolean environment variable"""
        value = os.environ.get(key, str(default)).lower()
        return value in ('true', '1', 'yes', 'on')

    def get_int(self, key: str, default: int = 0) -> int:
        """Get an integer environment variable"""
        try:
            return int(os.environ.get(key, str(default)))
        except ValueError:
            logger.warning(f"Invalid integer value for {key}, using default {default}")
            return default

    def validate_required_variables(self, required_vars: list):
        """Raise ValueError naming every required variable that is not set"""
        missing_vars = [var for var in required_vars if not os.environ.get(var)]

        if missing_vars:
            raise ValueError(f"Missing required environment variables: {', '.join(missing_vars)}")


# Global instance
env_loader = EnvironmentLoader()


# Convenience functions
def get_env(key: str, default: Any = None, required: bool = False) -> Any:
    """Get an environment variable"""
    return env_loader.get(key, default, required)


def get_bool_env(key: str, default: bool = False) -> bool:
    """Get a boolean environment variable"""
    return env_loader.get_bool(key, default)


def get_int_env(key: str, default: int = 0) -> int:
    """Get an integer environment variable"""
    return env_loader.get_int(key, default)


def validate_environment():
    """Validate the variables a production deployment needs"""
    env_loader.validate_required_variables(['DJANGO_SECRET_KEY'])
