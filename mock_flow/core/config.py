import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field

# Default configuration values
DEFAULT_CONFIG_PATH = "mockflow.config.yaml"
DEFAULT_MOCK_SUFFIX = "Mock"
DEFAULT_HEADER = "///\n/// @Generated by mock_flow\n///"
DEFAULT_IMPORTS = ["Foundation"]
DEFAULT_LOG_LEVEL = "INFO"

logger = logging.getLogger(__name__)


class MockFlowConfig(BaseModel):
    """
    Central configuration model for mock generation.

    Template fields override the built-in templates in
    `mock_flow.core.templates` when set.
    """
    mock_suffix: str = Field(default=DEFAULT_MOCK_SUFFIX)
    header: str = Field(default=DEFAULT_HEADER)
    imports: List[str] = Field(default_factory=lambda: list(DEFAULT_IMPORTS))
    method_template: Optional[str] = None
    closure_template: Optional[str] = None
    class_template: Optional[str] = None
    output_path: Optional[str] = None
    log_level: str = Field(default=DEFAULT_LOG_LEVEL)

    class Config:
        extra = "allow"

    def load_template_file(self, value: Optional[str]) -> Optional[str]:
        """Template fields may hold the template text or a `file:` path to it."""
        if value and value.startswith("file:"):
            return Path(value[len("file:"):]).read_text(encoding="utf-8")
        return value

    def templates(self) -> Dict[str, Optional[str]]:
        return {
            "method_template": self.load_template_file(self.method_template),
            "closure_template": self.load_template_file(self.closure_template),
            "class_template": self.load_template_file(self.class_template),
        }


def _read_config_file(path: Path, explicit: bool) -> Dict[str, Any]:
    """
    Read the YAML mapping stored at `path`.

    A broken or missing file never stops generation: the problem is logged
    and the defaults apply. Only an explicitly requested file is worth a
    warning when it is absent.
    """
    if not path.is_file():
        if explicit:
            logger.warning(f"Config file not found at explicit path: {path}")
        else:
            logger.info(f"No config file found at {path}, using defaults.")
        return {}

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to load config file {path}: {e}")
        return {}

    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Ignoring config file {path}: expected a mapping, got {type(data).__name__}")
        return {}
    logger.info(f"Loaded configuration from {path}")
    return data


def load_config(
    config_path: Optional[str] = None,
    cli_args: Optional[Dict[str, Any]] = None
) -> MockFlowConfig:
    """
    Resolve the generator configuration.

    Command line values win over the config file, which wins over the
    defaults on `MockFlowConfig`. A None command line value means the flag
    was not given.

    Args:
        config_path: YAML config file; `mockflow.config.yaml` in the working
            directory is tried when omitted.
        cli_args: Command line values keyed by config field name.
    """
    path = Path(config_path or DEFAULT_CONFIG_PATH)
    settings = _read_config_file(path, explicit=config_path is not None)
    overrides = {key: value for key, value in (cli_args or {}).items() if value is not None}
    return MockFlowConfig.model_validate({**settings, **overrides})
