"""
Configuration Loader for the template keyword table

Loads keyword mappings from YAML once at process start. The result is an
immutable tuple handed to KeywordMatcher, so tests can build a matcher
with any table they like.
"""

from functools import lru_cache
from typing import Optional, Tuple
from pathlib import Path
import yaml

from app.core.config import settings
from app.core.logging_config import logger
from app.services.template_matcher import KeywordMapping, KeywordMatcher


class ConfigLoader:
    """Load keyword mappings from a YAML file"""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize ConfigLoader

        Args:
            config_path: Path to keyword_mappings.yml (defaults to settings.keyword_mappings_path)
        """
        self.config_path = Path(config_path) if config_path else settings.keyword_mappings_path

        if not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

    def load_keyword_mappings(self) -> Tuple[KeywordMapping, ...]:
        """
        Load all keyword mappings from YAML

        Returns:
            Tuple of KeywordMapping in file order
        """
        with open(self.config_path, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f) or {}

        mappings = []
        for index, entry in enumerate(config.get('mappings', [])):
            try:
                mappings.append(KeywordMapping.from_dict(entry))
            except (KeyError, TypeError, ValueError) as e:
                raise ValueError(f"Invalid keyword mapping #{index} in {self.config_path}: {e}") from e

        logger.info(f"Loaded {len(mappings)} keyword mappings from {self.config_path}")
        return tuple(mappings)


@lru_cache(maxsize=1)
def get_keyword_matcher() -> KeywordMatcher:
    """FastAPI dependency: the process-wide matcher, built on first use"""
    return KeywordMatcher(ConfigLoader().load_keyword_mappings())
