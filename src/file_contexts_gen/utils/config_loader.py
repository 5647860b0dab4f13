import yaml
from pathlib import Path
from typing import Dict, Any, Optional, Union
from file_contexts_gen.config import ConfigurationError
from file_contexts_gen.utils.logger import get_logger

logger = get_logger(__name__)

class ConfigLoader:
    """Loads option defaults from a YAML file"""

    KNOWN_KEYS = {'mode', 'fstype', 'threads', 'quiet'}

    @staticmethod
    def load_defaults(config_path: Optional[Union[str, Path]]) -> Dict[str, Any]:
        """
        Load defaults from a YAML mapping such as:

            fstype: erofs
            threads: 8
            quiet: true

        A missing file only produces a warning. Unknown keys are ignored.
        """
        if not config_path:
            return {}

        path = Path(config_path)
        if not path.exists():
            logger.warning(f"Config file {config_path} not found. Using defaults.")
            return {}

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid config file {config_path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {config_path} must contain a mapping")

        unknown = set(data) - ConfigLoader.KNOWN_KEYS
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {sorted(unknown)}")

        defaults = {key: value for key, value in data.items() if key in ConfigLoader.KNOWN_KEYS}
        logger.info(f"Loaded configuration from {config_path}")
        return defaults
