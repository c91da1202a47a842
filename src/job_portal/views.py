"""Build list-view controllers from configuration."""

import logging
from typing import Any, Dict, Optional

from job_portal.api.client import PortalClient
from job_portal.api.resources import RESOURCES, PortalResource
from job_portal.config import PortalConfig, ViewConfig
from job_portal.errors import ConfigError
from job_portal.filters.dates import RelativeDateClassifier
from job_portal.listview.controller import ListViewController
from job_portal.listview.sorting import ComparatorRegistry

logger = logging.getLogger(__name__)


def build_client(config: PortalConfig) -> PortalClient:
    return PortalClient(
        base_url=config.api.base_url,
        token=config.api.token,
        timeout=config.api.timeout,
    )


def build_resource(
    view: ViewConfig,
    client: PortalClient,
    path_params: Optional[Dict[str, Any]] = None,
    extra_params: Optional[Dict[str, Any]] = None,
) -> PortalResource:
    """
    Instantiate the API resource behind a view.

    ``list_path`` may contain placeholders such as ``{jobseeker_id}``,
    filled from ``path_params``.

    Raises:
        ConfigError: If the resource is unknown or a placeholder is missing
    """
    if view.resource not in RESOURCES:
        raise ConfigError(
            f"Unknown resource '{view.resource}'. Available: {', '.join(sorted(RESOURCES))}"
        )
    resource_class = RESOURCES[view.resource]

    list_path = view.list_path or resource_class.list_path
    try:
        list_path = list_path.format(**(path_params or {}))
    except KeyError as e:
        raise ConfigError(f"Missing path parameter {e} for {list_path}") from e

    return resource_class(
        client,
        list_path=list_path,
        status_path=view.status_path,
        remove_path=view.remove_path,
        extra_params=extra_params,
    )


def build_controller(
    config: PortalConfig,
    view_name: str,
    client: Optional[PortalClient] = None,
    path_params: Optional[Dict[str, Any]] = None,
    extra_params: Optional[Dict[str, Any]] = None,
    classifier: Optional[RelativeDateClassifier] = None,
) -> ListViewController:
    """
    Create the controller for a configured view.

    Args:
        config: Loaded configuration
        view_name: Key under ``views`` in config.yaml
        client: HTTP client; built from ``config.api`` when omitted
        path_params: Values for placeholders in the list path
        extra_params: Query parameters sent with every list request
        classifier: Date classifier (fixed "now" in tests)

    Returns:
        ListViewController ready for ``refresh()``

    Raises:
        ConfigError: If the view, its resource or its workflow is invalid
    """
    view = config.view(view_name)
    client = client or build_client(config)
    api = build_resource(view, client, path_params, extra_params)

    try:
        registry = ComparatorRegistry(
            date_field=view.date_field,
            salary_field=view.salary_field,
            title_field=view.title_field,
            default=view.default_sort,
        )
    except ValueError as e:
        raise ConfigError(f"View '{view_name}': {e}") from e

    logger.info(
        f"Building view '{view_name}' ({view.resource}, {view.pagination.value} pagination, "
        f"{len(view.facets)} facets)"
    )
    return ListViewController(
        api,
        view=view_name,
        search_fields=view.search_fields,
        facets=view.facets,
        registry=registry,
        default_sort=view.default_sort,
        page_size=view.page_size,
        pagination=view.pagination,
        debounce_seconds=view.debounce_seconds,
        id_field=view.id_field,
        status_field=view.status_field,
        transition_table=config.transition_table(view.workflow),
        classifier=classifier,
        stats_statuses=view.stats_statuses,
    )
