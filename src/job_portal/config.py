"""
Configuration loading.

Settings live in config/config.yaml; the API URL and token can be
overridden from the environment (or a .env file):

    JOB_PORTAL_API_URL   API root (default http://localhost:5000)
    JOB_PORTAL_TOKEN     Bearer token
    JOB_PORTAL_CONFIG    Path of the YAML file
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from job_portal.api.client import DEFAULT_BASE_URL, DEFAULT_TIMEOUT
from job_portal.errors import ConfigError
from job_portal.filters.facets import FacetDefinition
from job_portal.listview.debounce import DEFAULT_DEBOUNCE_SECONDS
from job_portal.listview.paginator import PaginationMode
from job_portal.workflow.models import TransitionTable

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/config.yaml"


class ApiSettings(BaseModel):
    """Connection to the portal REST API."""

    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    token: Optional[str] = None


class ViewConfig(BaseModel):
    """
    One list screen.

    Field paths are dotted paths into the API payload
    (e.g. ``jobPost.company.name``).
    """

    resource: str
    id_field: str = "id"
    status_field: Optional[str] = None
    date_field: str = "created_at"
    title_field: str = "title"
    salary_field: str = "salary"
    search_fields: List[str] = Field(default_factory=lambda: ["title"])
    facets: List[FacetDefinition] = Field(default_factory=list)
    default_sort: str = "newest"
    page_size: int = Field(default=10, ge=1)
    pagination: PaginationMode = PaginationMode.CLIENT
    debounce_seconds: float = Field(default=DEFAULT_DEBOUNCE_SECONDS, ge=0)
    workflow: Optional[str] = None
    stats_statuses: Optional[List[str]] = None
    list_path: Optional[str] = None
    status_path: Optional[str] = None
    remove_path: Optional[str] = None


class PortalConfig(BaseModel):
    """Top-level configuration."""

    api: ApiSettings = Field(default_factory=ApiSettings)
    workflows: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    views: Dict[str, ViewConfig] = Field(default_factory=dict)

    def view(self, name: str) -> ViewConfig:
        """
        Get a view by name.

        Raises:
            ConfigError: If the view is not configured
        """
        if name not in self.views:
            raise ConfigError(
                f"Unknown view '{name}'. Configured views: {', '.join(sorted(self.views))}"
            )
        return self.views[name]

    def transition_table(self, name: Optional[str]) -> Optional[TransitionTable]:
        """
        Build the transition table of a workflow.

        Returns:
            TransitionTable, or None when ``name`` is None

        Raises:
            ConfigError: If the workflow is not configured or invalid
        """
        if name is None:
            return None
        if name not in self.workflows:
            raise ConfigError(f"Unknown workflow '{name}'")
        try:
            return TransitionTable.from_config(self.workflows[name])
        except ValueError as e:
            raise ConfigError(f"Invalid workflow '{name}': {e}") from e


def load_config(config_path: Optional[str] = None) -> PortalConfig:
    """
    Load configuration from YAML and the environment.

    Args:
        config_path: Path to the YAML file; defaults to $JOB_PORTAL_CONFIG
            or config/config.yaml

    Returns:
        Validated PortalConfig

    Raises:
        ConfigError: If the file is missing, unreadable or invalid
    """
    load_dotenv()

    path = Path(config_path or os.getenv("JOB_PORTAL_CONFIG", DEFAULT_CONFIG_PATH))
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path, "r") as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to read config {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"Config {path} must contain a mapping at the top level")

    api = raw.setdefault("api", {}) or {}
    raw["api"] = api
    if os.getenv("JOB_PORTAL_API_URL"):
        api["base_url"] = os.getenv("JOB_PORTAL_API_URL")
    if os.getenv("JOB_PORTAL_TOKEN"):
        api["token"] = os.getenv("JOB_PORTAL_TOKEN")

    try:
        config = PortalConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {path}: {e}") from e

    for name, view in config.views.items():
        if view.workflow and view.workflow not in config.workflows:
            raise ConfigError(f"View '{name}' uses unknown workflow '{view.workflow}'")

    logger.info(f"Loaded config from {path}: {len(config.views)} views")
    return config
