"""Command-line entry point: fetch a list view and print one page of it."""

import argparse
import asyncio
import sys
from typing import Any, Dict, List, Optional

from job_portal.config import load_config
from job_portal.errors import ConfigError
from job_portal.filters.models import FacetKind
from job_portal.listview.controller import ListViewController
from job_portal.listview.state import ViewState
from job_portal.logging_config import get_logger, setup_logging, truncate_for_display
from job_portal.views import build_controller

# Configure logging (will be called in main())
logger = get_logger(__name__)


def parse_facets(pairs: List[str], controller: ListViewController) -> Dict[str, Any]:
    """
    Parse ``key=value`` facet arguments.

    Range facets take ``min,max``; either side may be empty.
    """
    values: Dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep:
            raise ValueError(f"Facet must look like key=value, got '{pair}'")
        definition = controller.facet_definitions.get(key)
        if definition is None:
            raise ValueError(
                f"Unknown facet '{key}'. Available: {', '.join(controller.facet_definitions)}"
            )
        if definition.kind == FacetKind.NUMERIC_RANGE:
            low, _, high = value.partition(",")
            values[key] = [float(low) if low else None, float(high) if high else None]
        else:
            values[key] = value
    return values


def print_page(state: ViewState, title_field: str) -> None:
    """Print the visible page as a numbered list."""
    window = state.window
    print("\n" + "=" * 70)
    print(
        f"{state.view}: page {window.page_index}/{max(window.total_pages, 1)} "
        f"- {state.filtered_count} matching, sort={state.sort}"
    )
    if state.applied_filters:
        print(f"Filters applied: {state.applied_filters}")
    print("=" * 70)

    if state.error:
        print(f"Error: {state.error.message}")

    for position, record in enumerate(state.visible, start=window.start_index + 1):
        _, title = truncate_for_display(str(record.get(title_field, record.id)))
        status = f" [{record.status}]" if record.status else ""
        print(f"{position:>4}. {title}{status}")

    if not state.visible:
        print("No records.")

    stats = {k: v for k, v in state.stats.items() if k != "total"}
    if stats:
        print("-" * 70)
        print(", ".join(f"{k}: {v}" for k, v in stats.items()))
    print("=" * 70)


async def run(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    view = config.view(args.view)

    path_params = {}
    extra_params = {}
    if args.jobseeker_id:
        path_params["jobseeker_id"] = args.jobseeker_id
    if args.job_post_id:
        extra_params["job_post_id"] = args.job_post_id

    controller = build_controller(
        config, args.view, path_params=path_params, extra_params=extra_params
    )
    try:
        result = await controller.refresh()
        if not result.ok:
            print_page(controller.state, view.title_field)
            return 1

        for key, value in parse_facets(args.facet, controller).items():
            await controller.set_facet(key, value)
        if args.sort:
            await controller.set_sort(args.sort)
        if args.query:
            controller.set_query(args.query)
            await controller.flush_search()
        if args.page > 1:
            await controller.go_to_page(args.page)

        print_page(controller.state, view.title_field)
        return 0 if controller.state.error is None else 1
    finally:
        controller.close()


def main(argv: Optional[List[str]] = None) -> None:
    """Main execution function."""
    parser = argparse.ArgumentParser(
        description="Job Portal - browse list views from the command line"
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to configuration file (default: $JOB_PORTAL_CONFIG or config/config.yaml)",
    )
    parser.add_argument("--view", required=True, help="View name from config.yaml")
    parser.add_argument("--query", help="Search text")
    parser.add_argument("--sort", help="Sort strategy (newest, oldest, salary_desc, ...)")
    parser.add_argument("--page", type=int, default=1, help="Page to show (default: 1)")
    parser.add_argument(
        "--facet",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Facet value, repeatable (e.g. --facet status=pending --facet salary=10,50)",
    )
    parser.add_argument("--jobseeker-id", help="Jobseeker for application history views")
    parser.add_argument("--job-post-id", help="Restrict applicant views to one job post")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    args = parser.parse_args(argv)

    setup_logging(log_level=args.log_level)

    try:
        exit_code = asyncio.run(run(args))
    except (ConfigError, ValueError) as e:
        logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        exit_code = 2

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
