"""Configuration loader for the HTML grader.

Provides centralized access to grader configuration parameters.
"""
from __future__ import annotations

import os
import yaml
from pathlib import Path
from typing import Any, Optional
import structlog

logger = structlog.get_logger(__name__)

CONFIG_FILE = Path(__file__).parent / "grader_config.yaml"
CONFIG_ENV_VAR = "GRADER_CONFIG"


class ConfigLoader:
    """Loads and provides access to grader configuration."""
    
    _instance: Optional[ConfigLoader] = None
    _config: Optional[dict[str, Any]] = None
    
    def __new__(cls) -> ConfigLoader:
        """Singleton pattern - ensure only one config instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance
    
    def __init__(self):
        """Initialize config loader (only runs once due to singleton)."""
        if self._config is None:
            self._load_config()
    
    def _config_path(self) -> Path:
        override = os.getenv(CONFIG_ENV_VAR)
        return Path(override) if override else CONFIG_FILE
    
    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        path = self._config_path()
        if path.exists():
            with open(path, encoding="utf-8") as f:
                self._config = yaml.safe_load(f) or {}
            logger.debug("config_loaded", path=str(path))
        else:
            logger.warning("config_file_not_found", path=str(path))
            self._config = {}
    
    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by dot-notation key.
        
        Examples:
            config.get("io.input_path")
            config.get("conformance.rules.void-style")
            config.get("nonexistent.key", default=100)
        """
        if not self._config:
            return default
        
        keys = key.split(".")
        value = self._config
        
        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default
        
        return value
    
    def reload(self) -> None:
        """Reload configuration from file."""
        self._config = None
        self._load_config()


# Singleton instance
_config = ConfigLoader()


def get_config() -> ConfigLoader:
    """Get the global config instance."""
    return _config


# Convenience functions for common config access
def get_input_path() -> str:
    """Submission path; GRADER_INPUT_PATH wins over the YAML value."""
    return os.getenv("GRADER_INPUT_PATH") or _config.get("io.input_path", "index.html")


def get_feedback_path() -> str:
    """Markdown feedback file path; GRADER_FEEDBACK_PATH wins over the YAML value."""
    return os.getenv("GRADER_FEEDBACK_PATH") or _config.get("io.feedback_path", "grading-feedback.md")


def get_summary_env_var() -> str:
    """Name of the environment variable holding the CI step summary path."""
    return _config.get("io.summary_env_var", "GITHUB_STEP_SUMMARY")


def get_report_title() -> str:
    return _config.get("report.title", "HTML Fan Page")


def get_conformance_rules() -> dict[str, str]:
    """Get configured conformance rule severities (rule -> off/warning/error)."""
    rules = _config.get("conformance.rules", default={})
    return {str(k): str(v).lower() for k, v in rules.items()}


def get_comment_detection() -> str:
    """Get hygiene comment detection mode (lexical or token)."""
    mode = str(_config.get("hygiene.comment_detection", "lexical")).lower()
    if mode not in ("lexical", "token"):
        logger.warning("unknown_comment_detection", mode=mode)
        return "lexical"
    return mode
