"""
Configurable logging setup for comicshelf.

Loads the logging configuration from a YAML file.
"""
import logging
import logging.config
from pathlib import Path
from typing import Optional, Union

import yaml

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(config_path: Optional[Union[str, Path]] = None, default_level: int = logging.INFO):
    """
    Configure logging from a YAML file.

    Args:
        config_path: Path to the YAML configuration.
                     If None, uses comicshelf/config/logging_config.yaml
        default_level: Level used when the configuration cannot be loaded
    """
    if config_path is None:
        config_path = Path(__file__).parent / "logging_config.yaml"

    config_path = Path(config_path)

    if config_path.exists():
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)

            # Create the directory of any file handler
            for handler in config.get("handlers", {}).values():
                filename = handler.get("filename")
                if filename:
                    Path(filename).parent.mkdir(parents=True, exist_ok=True)

            logging.config.dictConfig(config)

            logger = logging.getLogger(__name__)
            logger.debug(f"Logging configured from: {config_path}")

        except (OSError, ValueError, TypeError, AttributeError, yaml.YAMLError) as e:
            # Fall back to basic configuration if the file is unusable
            logging.basicConfig(level=default_level, format=DEFAULT_FORMAT)
            logging.error(f"Error loading logging configuration: {e}")
            logging.warning("Using default logging configuration")
    else:
        logging.basicConfig(level=default_level, format=DEFAULT_FORMAT)
        logging.warning(f"Logging configuration not found: {config_path}")
