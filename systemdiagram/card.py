"""System diagram card: fetch, state tracking and rendering.

The card owns one diagram for one system entity. ``refresh`` fetches the
system's entities on a worker thread; while the fetch is in flight the
card is LOADING, a failed fetch puts it in ERROR with the graph
suppressed, and a successful fetch builds the graph and makes it READY.

Usage:
    card = SystemDiagramCard(client, system_entity)
    card.refresh()
    card.wait(timeout=30)
    if card.state is DiagramState.READY:
        print(card.render(JsonRenderer()))
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, Future
from enum import Enum
from typing import List, Optional

from systemdiagram.catalog.client import EntityCatalogClient, EntityFilter
from systemdiagram.catalog.model import Entity
from systemdiagram.config.schema import DiagramConfig
from systemdiagram.export import DiagramRenderer
from systemdiagram.graph.builder import GraphBuilder
from systemdiagram.graph.schema import SystemGraph

logger = logging.getLogger("systemdiagram.card")


class DiagramState(Enum):
    """Externally observable card states."""

    LOADING = "loading"
    ERROR = "error"
    READY = "ready"


class DiagramNotReadyError(RuntimeError):
    """Rendering was requested while the card is loading or failed."""


class SystemDiagramCard:
    """Diagram of one system, rebuilt on every refresh."""

    def __init__(
        self,
        client: EntityCatalogClient,
        entity: Entity,
        config: Optional[DiagramConfig] = None,
        executor: Optional[Executor] = None,
    ) -> None:
        """Initialize the card.

        Args:
            client: Catalog client used to fetch the system's entities.
            entity: The system entity to diagram.
            config: Diagram settings.
            executor: Executor for fetches. When omitted each fetch runs on
                a daemon thread so an abandoned fetch never blocks exit.
        """
        self.client = client
        self.entity = entity
        self.config = config or DiagramConfig()
        self._executor = executor
        self._lock = threading.Lock()
        self._generation = 0
        self._future: Optional[Future] = None
        self._state = DiagramState.LOADING
        self._graph: Optional[SystemGraph] = None
        self._error: Optional[BaseException] = None
        self._related: List[Entity] = []

    @property
    def entity_filter(self) -> EntityFilter:
        return EntityFilter(system=self.entity.metadata.name, kinds=tuple(self.config.kinds))

    @property
    def state(self) -> DiagramState:
        with self._lock:
            return self._state

    @property
    def graph(self) -> Optional[SystemGraph]:
        """The built graph, or None unless the card is READY."""
        with self._lock:
            return self._graph if self._state is DiagramState.READY else None

    @property
    def error(self) -> Optional[BaseException]:
        with self._lock:
            return self._error

    @property
    def related_entities(self) -> List[Entity]:
        with self._lock:
            return list(self._related)

    def refresh(self) -> Future:
        """Start a new fetch, superseding any fetch still in flight.

        Returns:
            Future: Completes with the built graph or the fetch error.
        """
        with self._lock:
            self._generation += 1
            generation = self._generation
            self._state = DiagramState.LOADING
            self._graph = None
            self._error = None
            self._related = []
            if self._future is not None and not self._future.done():
                self._future.cancel()

        logger.debug("Starting fetch #%d for system %s", generation, self.entity.metadata.name)
        future = self._submit(generation)
        with self._lock:
            if generation == self._generation:
                self._future = future
        return future

    def _submit(self, generation: int) -> Future:
        if self._executor is not None:
            return self._executor.submit(self._load, generation)

        future: Future = Future()
        future.set_running_or_notify_cancel()
        thread = threading.Thread(
            target=self._run_detached,
            args=(future, generation),
            name=f"systemdiagram-fetch-{generation}",
            daemon=True,
        )
        thread.start()
        return future

    def _run_detached(self, future: Future, generation: int) -> None:
        try:
            graph = self._load(generation)
        except Exception as exc:
            future.set_exception(exc)
            return
        future.set_result(graph)

    def _load(self, generation: int) -> SystemGraph:
        try:
            related = self.client.get_entities(self.entity_filter)
        except Exception as exc:
            self._finish(generation, error=exc)
            raise

        graph = GraphBuilder(self.config.direction).build(self.entity, related)
        self._finish(generation, graph=graph, related=related)
        return graph

    def _finish(
        self,
        generation: int,
        graph: Optional[SystemGraph] = None,
        related: Optional[List[Entity]] = None,
        error: Optional[BaseException] = None,
    ) -> None:
        with self._lock:
            if generation != self._generation:
                logger.debug("Discarding result of stale fetch #%d", generation)
                return
            if error is not None:
                logger.warning(
                    "Fetching entities for system %s failed: %s",
                    self.entity.metadata.name,
                    error,
                )
                self._state = DiagramState.ERROR
                self._error = error
                return
            self._state = DiagramState.READY
            self._graph = graph
            self._related = list(related or [])

    def wait(self, timeout: Optional[float] = None) -> DiagramState:
        """Block until the current fetch settles and return the state.

        Raises:
            concurrent.futures.TimeoutError: If the fetch does not settle in time.
        """
        with self._lock:
            future = self._future
        if future is not None:
            # Errors are reflected in the card state
            future.exception(timeout=timeout)
        return self.state

    def render(self, renderer: DiagramRenderer) -> str:
        """Render the current graph.

        Raises:
            DiagramNotReadyError: If the card is loading or the fetch failed.
        """
        with self._lock:
            state, graph, error = self._state, self._graph, self._error
        if state is DiagramState.ERROR:
            raise DiagramNotReadyError(f"System diagram unavailable: {error}") from error
        if graph is None:
            raise DiagramNotReadyError("System diagram is still loading")
        return renderer.render(graph)

    def close(self) -> None:
        """Stop waiting on the current fetch.

        A queued fetch on an injected executor is cancelled; a running fetch
        finishes in the background and its result is discarded.
        """
        with self._lock:
            self._generation += 1
            future = self._future
            self._future = None
        if future is not None and not future.done():
            future.cancel()

    def __enter__(self) -> "SystemDiagramCard":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
