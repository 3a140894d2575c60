"""
TomTom Fuzzy Search Async Client

This module provides the FuzzySearch class, a stateful client recovering
from the API rate limiting ("Too Many Requests" errors) by delaying requests.

When a request is rate limited, it is put in an internal queue and a timer is
started. Every request made while the timer is pending is added to the same
queue instead of being sent to the API. When the timer fires, all queued
requests are sent concurrently and the client goes back to sending requests
immediately. A request rate limited again during this retry wave fails with
TooManyRequestsError, there is no second delay.

All state changes happen synchronously on the event loop thread, so no lock is
needed: there is no await between checking and updating the queue.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Coroutine, List, Mapping, Optional, Set, Tuple

import httpx

from .api import getAutoCompleteResults, getParams
from .constants import DELAY_TIME
from .exceptions import ConfigurationError, DisposedError, TooManyRequestsError
from .models import AutoCompleteOptions, AutoCompleteParams, AutoCompleteResult, FuzzySearchOptions

logger = logging.getLogger(__name__)


@dataclass
class QueuedRequest:
    """
    Request waiting for the delayed retry.

    Attributes:
        address: Address to search for
        options: Per-call options of the original call
        future: Future settled with the results once the request is retried
    """

    address: str
    options: AutoCompleteOptions
    future: "asyncio.Future[List[AutoCompleteResult]]"


def createQueuedRequest(address: str, options: AutoCompleteOptions) -> QueuedRequest:
    """Create a QueuedRequest with a pending future bound to the running loop."""
    future: "asyncio.Future[List[AutoCompleteResult]]" = asyncio.get_running_loop().create_future()
    return QueuedRequest(address=address, options=options, future=future)


def _makeCancelCallback(task: asyncio.Task) -> Callable[[asyncio.Future], None]:
    """Get a future done callback cancelling the task sending the request if the future was cancelled."""

    def callback(future: asyncio.Future) -> None:
        if future.cancelled():
            task.cancel()

    return callback


class FuzzySearch:
    """Stateful fuzzy search client managing rate limiting by using an internal queue, dood!

    Must be used from a running event loop. Each autoComplete() call returns an
    independent future, so concurrent callers never block each other.

    Example:
        >>> async with FuzzySearch(apiKey="your_api_key", limit=10) as search:
        ...     results = await search.autoComplete("Charlotte Street")
        ...     for result in results:
        ...         print(result.freeformAddress)

    Attributes:
        delay: Delay in seconds applied after a "Too Many Requests" error
        params: Query parameters sent to the API
    """

    def __init__(
        self,
        apiKey: Optional[str] = None,
        delay: Optional[float] = None,
        limit: Optional[int] = None,
        *,
        env: Optional[Mapping[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the FuzzySearch client.

        Args:
            apiKey: TomTom API key, falls back to TOMTOM_API_KEY if not provided
            delay: Delay in seconds after a "Too Many Requests" error (default: 5 seconds)
            limit: Maximum number of results per request, clamped to [1, 100] (default: 100)
            env: Environment mapping for the API key fallback (default: os.environ)
            transport: Optional httpx transport used for all requests

        Raises:
            ConfigurationError: If no API key is available or delay is not positive
        """
        self.delay: float = DELAY_TIME if delay is None else delay
        if self.delay <= 0:
            raise ConfigurationError(f"Delay must be positive, got {self.delay}")

        self.params: AutoCompleteParams = getParams(FuzzySearchOptions(apiKey=apiKey, limit=limit), env=env)
        self._transport = transport

        # Set and cleared together: queue is None exactly when timer is None
        self._queue: Optional[List[QueuedRequest]] = None
        self._timer: Optional[asyncio.TimerHandle] = None

        # Keep references to running tasks so they are not garbage collected
        self._tasks: Set[asyncio.Task] = set()

        logger.debug(f"FuzzySearch initialized with delay={self.delay}s, limit={self.params.limit}")

    @classmethod
    def fromOptions(cls, options: FuzzySearchOptions, **kwargs: Any) -> "FuzzySearch":
        """Create a client from FuzzySearchOptions, extra kwargs are passed to the constructor."""
        return cls(apiKey=options.apiKey, delay=options.delay, limit=options.limit, **kwargs)

    async def __aenter__(self) -> "FuzzySearch":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.dispose()

    @property
    def queue(self) -> Optional[Tuple[QueuedRequest, ...]]:
        """Snapshot of the requests waiting for the delayed retry, None when not delaying.

        Exposed for introspection (tests, monitoring), changing it has no effect.
        """
        if self._queue is None:
            return None
        return tuple(self._queue)

    def autoComplete(
        self,
        address: str,
        options: Optional[AutoCompleteOptions] = None,
    ) -> "asyncio.Future[List[AutoCompleteResult]]":
        """Run an autocomplete query on the API, dood!

        If requests are currently being delayed, the request is added to the
        queue right away (before this method returns) and will be sent when
        the delay elapses. Otherwise the request is sent immediately.

        Cancelling the returned future only affects this request.

        Args:
            address: Free-form address to search for
            options: Per-call options (timeout)

        Returns:
            Future resolving to the list of results

        Raises (through the future):
            TooManyRequestsError: If the retried request is rate limited again
            pydantic.ValidationError: If the response doesn't match the expected schema
            TransportError: For any other HTTP or network failure
            DisposedError: If the client is disposed while the request is queued
        """
        if options is None:
            options = AutoCompleteOptions()

        queue = self._queue
        if queue is None:
            # Not currently delaying requests, so we can run the request immediately
            return self._spawn(self._runAutoComplete(address, options))

        request = createQueuedRequest(address, options)
        queue.append(request)
        logger.debug(f"Added request to the delayed queue, {len(queue)} requests queued")
        return request.future

    def dispose(self) -> None:
        """Cancel the pending retry and fail all queued requests with DisposedError.

        Safe to call several times. Requests already sent by a retry wave are not affected.
        Futures nobody awaits anymore don't trigger the "exception was never retrieved" log.
        """
        timer = self._timer
        queue = self._queue
        self._timer = None
        self._queue = None

        if timer is not None:
            timer.cancel()

        if not queue:
            return

        rejected = 0
        for request in queue:
            if not request.future.done():
                request.future.set_exception(DisposedError())
                # Mark as retrieved: callers may have dropped their future, awaiting it still raises
                request.future.exception()
                rejected += 1
        logger.info(f"FuzzySearch disposed, rejected {rejected} queued requests")

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
        """Create a task and keep a reference to it until it's done."""
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _runAutoComplete(self, address: str, options: AutoCompleteOptions) -> List[AutoCompleteResult]:
        """Run the query and recover from the "Too Many Requests" error by delaying it.

        This method should be considered private, other errors are propagated as not recoverable.
        """
        try:
            return await getAutoCompleteResults(self.params, address, options, transport=self._transport)
        except TooManyRequestsError:
            request = createQueuedRequest(address, options)
            self._handleDelay(request)
            return await request.future

    def _handleDelay(self, request: QueuedRequest) -> None:
        """Add a rate limited request to the queue, creating it and starting the timer if needed."""
        if self._queue is None:
            self._queue = [request]
            self._timer = asyncio.get_running_loop().call_later(self.delay, self._drainQueue)
            logger.warning(f"Too many requests, delaying requests for {self.delay}s")
        else:
            self._queue.append(request)
            logger.debug(f"Added rate limited request to the delayed queue, {len(self._queue)} requests queued")

    def _drainQueue(self) -> None:
        """Timer callback: send all queued requests and go back to sending requests immediately."""
        queue = self._queue

        # Sanity check the queue exists
        if queue:
            logger.info(f"Retrying {len(queue)} delayed requests")
            for request in queue:
                # Skip requests cancelled while waiting
                if request.future.done():
                    continue
                task = self._spawn(self._runQueuedRequest(request))
                request.future.add_done_callback(_makeCancelCallback(task))

        self._queue = None
        self._timer = None

    async def _runQueuedRequest(self, request: QueuedRequest) -> None:
        """Send a queued request and settle its future.

        In case of error no further delay is applied, the error is propagated to the caller.
        """
        try:
            results = await getAutoCompleteResults(
                self.params,
                request.address,
                request.options,
                transport=self._transport,
            )
        except Exception as e:
            if isinstance(e, TooManyRequestsError):
                logger.warning(f"Request still rate limited after {self.delay}s delay, giving up")
            if not request.future.done():
                request.future.set_exception(e)
            return

        if not request.future.done():
            request.future.set_result(results)
