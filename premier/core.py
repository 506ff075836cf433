import yaml
import logging
import logging.config
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

logger = logging.getLogger(__name__)

BASIC_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


class ConfigLoader:
    """
    Read-only view of the YAML run configuration.

    Top-level sections are 'indicators' (factory entries), 'validation'
    (bar file, reference column, tolerance, output file) and 'logging'
    (a logging.config dictionary).
    """
    def __init__(self, config_path: Union[str, Path]):
        """Read and parse config_path; FileNotFoundError or yaml.YAMLError propagate."""
        self.config_path = Path(config_path)
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        try:
            text = self.config_path.read_text()
        except FileNotFoundError:
            logger.error(f"Configuration file not found at '{self.config_path}'")
            raise

        try:
            loaded = yaml.safe_load(text)
        except yaml.YAMLError as e:
            logger.error(f"Malformed YAML in {self.config_path.name}: {e}")
            raise
        # An empty document loads as None
        return loaded or {}

    def get(self, key: str, default: Any = None) -> Any:
        """Top-level section or value, or default when absent."""
        return self.config.get(key, default)

    def __getitem__(self, key: str) -> Any:
        """Top-level section; KeyError when absent."""
        return self.config[key]

    def get_all(self) -> Dict[str, Any]:
        """The whole parsed document."""
        return self.config

    def indicator_specs(self) -> List[Dict[str, Any]]:
        """Entries of the 'indicators' section, e.g. [{'type': 'pso', 'period': 14}]."""
        specs = self.config.get('indicators') or []
        if not isinstance(specs, list):
            raise TypeError(f"'indicators' must be a list of mappings, got {type(specs).__name__}")
        return specs


def setup_logging(config: Optional[Dict[str, Any]]) -> None:
    """Apply a logging.config dictionary, or fall back to a console basicConfig."""
    try:
        logging.config.dictConfig(config)
    except (ValueError, TypeError, AttributeError) as e:
        logging.basicConfig(level=logging.INFO, format=BASIC_LOG_FORMAT)
        logging.warning(f"Could not configure logging from dict: {e}. Using basic config.")
    else:
        logging.info("Logging configured from config file.")
