"""
List-view controller.

Runs the pipeline behind every list screen:

    fetch → facet chain → sort → page window → emit(ViewState)

and routes user intents (search, facet, sort, page, status change, remove)
back into it. All failures are caught here and returned as typed results;
subscribers get a ``Notification`` for anything the user should see.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from pydantic import ValidationError

from job_portal.api.base import RecordsAPI, ensure_success, invoke
from job_portal.errors import (
    FetchFailure,
    FetchResult,
    ListViewError,
    RemovalFailed,
    RemovalResult,
    TransitionResult,
    UpdateFailed,
)
from job_portal.filters.dates import RelativeDateClassifier
from job_portal.filters.facets import FacetDefinition, search_facet
from job_portal.filters.filter_engine import FacetFilterChain
from job_portal.filters.models import FacetSpec, FilterResult
from job_portal.filters.search import SearchIndexer
from job_portal.listview import state as reducers
from job_portal.listview.debounce import DEFAULT_DEBOUNCE_SECONDS, Debouncer
from job_portal.listview.paginator import PageWindow, PaginationMode, Paginator
from job_portal.listview.sorting import ComparatorRegistry
from job_portal.listview.state import ViewState
from job_portal.listview.stats import calculate_stats, count_applied_filters
from job_portal.logging_config import get_structured_logger
from job_portal.models import ListParams, ListResponse, Record
from job_portal.workflow.manager import StatusTransitionManager
from job_portal.workflow.models import TransitionTable

logger = logging.getLogger(__name__)
slog = get_structured_logger(__name__)

StateListener = Callable[[ViewState], None]


@dataclass(frozen=True)
class Notification:
    """
    Transient message for the user (toast).

    Attributes:
        level: "info" or "error"
        message: Text to show
        error: Failure behind an error notification
    """

    level: str
    message: str
    error: Optional[ListViewError] = None


NotificationListener = Callable[[Notification], None]


class ListViewController:
    """
    Owns the state of one list screen for one view session.

    Example:
        ```python
        controller = ListViewController(
            SavedJobsAPI(client),
            view="saved_jobs",
            search_fields=["jobPost.title", "jobPost.company.name"],
            registry=ComparatorRegistry(date_field="saved_at"),
        )
        controller.subscribe(render)
        await controller.refresh()
        await controller.set_sort("salary_desc")
        ```
    """

    def __init__(
        self,
        api: RecordsAPI,
        view: str = "list",
        search_fields: Sequence[str] = ("title",),
        facets: Sequence[FacetDefinition] = (),
        registry: Optional[ComparatorRegistry] = None,
        default_sort: Optional[str] = None,
        page_size: int = 10,
        pagination: PaginationMode = PaginationMode.CLIENT,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        id_field: str = "id",
        status_field: Optional[str] = None,
        transition_table: Optional[TransitionTable] = None,
        classifier: Optional[RelativeDateClassifier] = None,
        stats_statuses: Optional[Sequence[str]] = None,
    ):
        """
        Initialize controller.

        Args:
            api: Collaborator providing list / update_status / remove_record
            view: Screen name used in logs
            search_fields: Dotted paths searched by the query
            facets: Facets offered by the screen
            registry: Sort strategies; defaults to the built-in registry
            default_sort: Initial sort key; defaults to the registry default
            page_size: Records per page
            pagination: CLIENT slices locally, SERVER requests each page
            debounce_seconds: Quiet period before a search is applied
            id_field: Dotted path of the record identifier in payloads
            status_field: Dotted path of the workflow status, if any
            transition_table: Enables the status workflow when given
            classifier: Date classifier for date facets (fixed "now" in tests)
            stats_statuses: Statuses counted in the stats; defaults to the
                workflow's statuses
        """
        self.api = api
        self.view = view
        self.id_field = id_field
        self.status_field = status_field
        self.indexer = SearchIndexer(search_fields)
        self.facet_definitions: Dict[str, FacetDefinition] = {f.key: f for f in facets}
        self.chain = FacetFilterChain()
        self.registry = registry or ComparatorRegistry()
        self.paginator = Paginator(page_size=page_size, mode=pagination)
        self.classifier = classifier or RelativeDateClassifier()

        self.workflow: Optional[StatusTransitionManager] = None
        if transition_table is not None:
            self.workflow = StatusTransitionManager(
                api.update_status, transition_table, on_display=self._show_status
            )

        if stats_statuses is not None:
            self.stats_statuses = list(stats_statuses)
        elif self.workflow is not None:
            self.stats_statuses = list(self.workflow.table.statuses)
        else:
            self.stats_statuses = []

        sort = default_sort or self.registry.default
        self.state = ViewState(
            view=view,
            sort=self._known_sort(sort),
            window=self.paginator.first(),
            facets=self.default_facet_values(),
        )

        self._debouncer = Debouncer(self._criteria_changed, debounce_seconds)
        self._listeners: List[StateListener] = []
        self._notification_listeners: List[NotificationListener] = []
        self._fetch_generation = 0
        self._closed = False

    @property
    def server_paginated(self) -> bool:
        return self.paginator.mode == PaginationMode.SERVER

    # Observation

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Call ``listener`` with every new ViewState.

        Returns:
            Function that removes the subscription
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def subscribe_notifications(self, listener: NotificationListener) -> Callable[[], None]:
        """Call ``listener`` with every user-facing notification."""
        self._notification_listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._notification_listeners:
                self._notification_listeners.remove(listener)

        return unsubscribe

    def _dispatch(self, new_state: ViewState) -> None:
        self.state = new_state
        for listener in list(self._listeners):
            try:
                listener(new_state)
            except Exception as e:
                logger.error(f"[{self.view}] State listener failed: {e}")

    def _notify(self, level: str, message: str, error: Optional[ListViewError] = None) -> None:
        notification = Notification(level=level, message=message, error=error)
        for listener in list(self._notification_listeners):
            try:
                listener(notification)
            except Exception as e:
                logger.error(f"[{self.view}] Notification listener failed: {e}")

    # Pipeline

    def default_facet_values(self) -> Dict[str, Any]:
        return {key: d.default_value() for key, d in self.facet_definitions.items()}

    def active_facets(self, state: Optional[ViewState] = None) -> List[FacetSpec]:
        """FacetSpecs for the current search and facet values, inactive ones left out."""
        state = state or self.state
        facets = [search_facet(state.query, self.indexer)]
        for key, definition in self.facet_definitions.items():
            facets.append(definition.build(state.facets.get(key), self.classifier))
        return [f for f in facets if f is not None]

    def recompute(self) -> ViewState:
        """
        Re-run filter, sort and paging over the in-memory records.

        Synchronous; never touches the network.
        """
        state = self.state
        if self.server_paginated:
            # The server already searched, filtered and sorted this page
            filtered = ordered = list(state.records)
            window = state.window
            filtered_count = window.total_count
        else:
            active = self.active_facets(state)
            filtered = self.chain.apply(state.records, active)
            if logger.isEnabledFor(logging.DEBUG):
                kept = {r.id for r in filtered}
                for record in state.records:
                    if record.id not in kept:
                        self.chain.explain(record, active)
            ordered = self.registry.sort(filtered, state.sort)
            window = self.paginator.reconcile(state.window, total_count=len(ordered))
            filtered_count = len(ordered)
        visible = self.paginator.window(window, ordered)

        stats = calculate_stats(state.records, self.stats_statuses)
        applied = count_applied_filters(self.facet_definitions.values(), state.facets)

        slog.filter_activity(self.view, state.query, len(filtered), len(state.records))
        self._dispatch(reducers.computed(state, visible, filtered_count, window, stats, applied))
        return self.state

    def explain(self, record_id: str) -> Optional[FilterResult]:
        """
        Report which facets hide a loaded record.

        Returns:
            FilterResult for the current search and facets, or None when the
            record is not loaded
        """
        record = self.state.find(record_id)
        if record is None:
            return None
        return self.chain.explain(record, self.active_facets())

    def _list_params(self) -> ListParams:
        if not self.server_paginated:
            return ListParams()

        state = self.state
        filters = {
            key: value
            for key, value in state.facets.items()
            if key in self.facet_definitions and not self.facet_definitions[key].is_default(value)
        }
        request = self.paginator.request_params(state.window)
        return ListParams(
            page=request["page"],
            limit=request["limit"],
            search=state.query.strip() or None,
            filters=filters,
            sort=state.sort,
        )

    def _to_records(self, payloads: Sequence[Dict[str, Any]]) -> List[Record]:
        records = []
        for payload in payloads:
            try:
                records.append(Record.from_payload(payload, self.id_field, self.status_field))
            except (ValueError, ValidationError) as e:
                logger.warning(f"[{self.view}] Skipping malformed record: {e}")
        return records

    async def refresh(self) -> FetchResult:
        """
        Fetch records and re-run the pipeline.

        A result that arrives after a newer fetch was started is discarded.
        On failure the previous records stay visible and ``state.error`` is set.
        """
        if self._closed:
            return FetchResult(ok=False, applied=False, error=FetchFailure("View is closed"))

        self._fetch_generation += 1
        generation = self._fetch_generation
        params = self._list_params()
        self._dispatch(reducers.fetch_started(self.state, generation))
        slog.fetch_activity(self.view, "started", {"generation": generation, **params.to_query()})

        try:
            response = ensure_success(await invoke(self.api.list, params))
            parsed = ListResponse.model_validate(response)
        except Exception as e:
            if generation != self._fetch_generation:
                slog.fetch_activity(self.view, "superseded", {"generation": generation})
                return FetchResult(ok=True, applied=False)

            error = FetchFailure(f"Failed to load {self.view}: {e}")
            slog.fetch_activity(self.view, "failed", {"error": e})
            self._dispatch(reducers.fetch_failed(self.state, error))
            self._notify("error", error.message, error)
            return FetchResult(ok=False, error=error)

        if generation != self._fetch_generation:
            slog.fetch_activity(self.view, "superseded", {"generation": generation})
            return FetchResult(ok=True, applied=False)

        records = self._to_records(parsed.data)
        if self.workflow is not None:
            self.workflow.sync(records)
            records = [r.with_status(self.workflow.displayed_status(r.id)) for r in records]

        window = self.state.window
        if self.server_paginated:
            window = self.paginator.reconcile(
                window,
                total_count=parsed.total,
                total_pages=parsed.total_pages,
                fetched_count=len(records),
            )

        self._dispatch(reducers.fetch_succeeded(self.state, records, window))
        self.recompute()
        slog.fetch_activity(
            self.view,
            "completed",
            {"records": len(records), "page": window.page_index, "total": window.total_count},
        )
        return FetchResult(ok=True)

    async def _criteria_changed(self) -> FetchResult:
        if self.server_paginated:
            return await self.refresh()
        self.recompute()
        return FetchResult(ok=True)

    # Intents

    def set_query(self, query: str):
        """
        Update the search text.

        The text is stored immediately; filtering (or the refetch) runs once
        typing pauses for the debounce window. Requires a running event loop.

        Returns:
            asyncio.Task of the debounced run
        """
        self._dispatch(reducers.set_query(self.state, query))
        return self._debouncer.trigger()

    async def flush_search(self) -> Optional[FetchResult]:
        """Wait for a pending debounced search, if any."""
        return await self._debouncer.flush()

    async def set_facet(self, key: str, value: Any) -> FetchResult:
        """
        Change one facet value.

        Raises:
            KeyError: If the screen has no such facet
        """
        if key not in self.facet_definitions:
            raise KeyError(f"Unknown facet '{key}' for view {self.view}")
        self._debouncer.cancel()
        self._dispatch(reducers.set_facet(self.state, key, value))
        return await self._criteria_changed()

    async def reset_filters(self) -> FetchResult:
        """Clear search, facets and sort."""
        self._debouncer.cancel()
        self._dispatch(
            reducers.reset_filters(self.state, self.default_facet_values(), self.registry.default)
        )
        return await self._criteria_changed()

    async def set_sort(self, key: str) -> FetchResult:
        """Switch sort strategy; unknown keys fall back to the default."""
        self._debouncer.cancel()
        self._dispatch(reducers.set_sort(self.state, self._known_sort(key)))
        return await self._criteria_changed()

    def _known_sort(self, key: str) -> str:
        if key in self.registry:
            return key
        logger.warning(f"[{self.view}] Unknown sort '{key}', using '{self.registry.default}'")
        return self.registry.default

    async def next_page(self) -> FetchResult:
        return await self._move(self.paginator.next(self.state.window))

    async def previous_page(self) -> FetchResult:
        return await self._move(self.paginator.previous(self.state.window))

    async def go_to_page(self, page_index: int) -> FetchResult:
        return await self._move(self.paginator.go_to(self.state.window, page_index))

    async def _move(self, window: PageWindow) -> FetchResult:
        if window.page_index == self.state.window.page_index:
            return FetchResult(ok=True, applied=False)
        self._dispatch(reducers.set_window(self.state, window))
        if self.server_paginated:
            return await self.refresh()
        self.recompute()
        return FetchResult(ok=True)

    async def request_transition(self, record_id: str, status: str) -> TransitionResult:
        """
        Change a record's status optimistically.

        The record shows ``status`` at once; a failed server call restores the
        previous status and sends one error notification.
        """
        if self.workflow is None:
            error = UpdateFailed(f"{self.view} has no status workflow", record_id)
            self._notify("error", error.message, error)
            return TransitionResult(ok=False, error=error, record_id=record_id)

        result = await self.workflow.request_transition(record_id, status)
        if not result.ok:
            self._notify("error", result.error.message, result.error)
        return result

    def _show_status(self, record_id: str, status: Optional[str]) -> None:
        if self.state.find(record_id) is None:
            return
        self._dispatch(reducers.replace_status(self.state, record_id, status))
        self.recompute()

    async def remove_record(self, record_id: str) -> RemovalResult:
        """
        Remove a record (withdraw, unsave, unfollow).

        The record disappears immediately and counts/pages are recomputed
        without a refetch. If the server refuses, it is put back where it was.
        Removing a record that is not in the list succeeds without a call.
        """
        index = self.state.index_of(record_id)
        if index < 0:
            logger.debug(f"[{self.view}] Record {record_id} already absent")
            return RemovalResult(ok=True, record_id=record_id)

        record = self.state.records[index]
        slog.removal(record_id, "started", {"view": self.view})
        self._dispatch(reducers.remove_record(self.state, record_id))
        self._shift_total(-1)
        self.recompute()

        try:
            ensure_success(await invoke(self.api.remove_record, record_id))
        except Exception as e:
            self._dispatch(reducers.insert_record(self.state, record, index))
            self._shift_total(1)
            self.recompute()
            error = RemovalFailed(f"Failed to remove record {record_id}: {e}", record_id)
            slog.removal(record_id, "restored", {"error": e})
            self._notify("error", error.message, error)
            return RemovalResult(ok=False, error=error, record_id=record_id)

        if self.workflow is not None:
            self.workflow.discard(record_id)
        slog.removal(record_id, "completed")
        self._notify("info", "Removed from the list")
        return RemovalResult(ok=True, record_id=record_id)

    def _shift_total(self, delta: int) -> None:
        # Client mode recounts from the records; server totals are adjusted by hand
        if not self.server_paginated:
            return
        window = self.state.window
        self._dispatch(
            reducers.set_window(
                self.state,
                PageWindow.create(
                    page_index=window.page_index,
                    page_size=window.page_size,
                    total_count=window.total_count + delta,
                ),
            )
        )

    def close(self) -> None:
        """End the view session: drop timers, workflow state and subscribers."""
        self._closed = True
        self._fetch_generation += 1
        self._debouncer.cancel()
        if self.workflow is not None:
            self.workflow.clear()
        self._listeners.clear()
        self._notification_listeners.clear()
