# STS Query Client
# File: dispatcher.py
# Version: v5

"""Operation dispatcher: one generic entry point for every catalog operation.

Each call walks a fixed sequence of states::

    BUILT -> ENCODING -> SENDING -> PARSING -> DONE

and ends with exactly one ``Outcome``. Validation failures jump straight to
DONE without any network I/O. The SENDING phase runs under the retry
policy and the per-call timeout.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Mapping, Optional
import asyncio
import logging

from . import codec, parser
from .catalog import OperationCatalog
from .errors import ParseError, StsQueryError, TransportError, ValidationError
from .models import Failure, OperationSpec, Outcome, Request, Success
from .retry import RetryPolicy
from .transport import QueryTransport, RawResponse

logger = logging.getLogger(__name__)


class DispatchState(str, Enum):
    BUILT = "built"
    ENCODING = "encoding"
    SENDING = "sending"
    PARSING = "parsing"
    DONE = "done"


_ORDER = [
    DispatchState.BUILT,
    DispatchState.ENCODING,
    DispatchState.SENDING,
    DispatchState.PARSING,
    DispatchState.DONE,
]


@dataclass
class CallTrace:
    """Per-call record of state transitions and attempts."""

    operation: str
    states: List[DispatchState] = field(default_factory=list)
    attempts: int = 0

    @property
    def state(self) -> Optional[DispatchState]:
        return self.states[-1] if self.states else None

    def advance(self, state: DispatchState) -> None:
        current = self.state
        if current is DispatchState.DONE:
            raise RuntimeError(f"{self.operation}: call already finished")
        if current is not None and _ORDER.index(state) <= _ORDER.index(current):
            raise RuntimeError(
                f"{self.operation}: illegal transition {current.value} -> {state.value}"
            )
        self.states.append(state)
        logger.debug("%s: %s", self.operation, state.value)

    def record_attempt(self, attempt_number: int) -> None:
        self.attempts = attempt_number


class OperationDispatcher:
    """Runs operations from a frozen catalog through codec, transport and parser."""

    def __init__(
        self,
        catalog: OperationCatalog,
        transport: QueryTransport,
        retry_policy: RetryPolicy,
        call_timeout: Optional[float] = None,
    ) -> None:
        if not catalog.frozen:
            catalog.freeze()
        self.catalog = catalog
        self.transport = transport
        self.retry_policy = retry_policy
        self.call_timeout = call_timeout

    async def dispatch(
        self,
        operation_name: str,
        options: Optional[Mapping[str, Any]] = None,
        trace: Optional[CallTrace] = None,
    ) -> Outcome:
        trace = trace if trace is not None else CallTrace(operation=operation_name)

        try:
            operation = self.catalog.lookup(operation_name)
        except ValidationError as exc:
            return self._finish_failure(trace, exc)

        request = Request(operation=operation, options=dict(options or {}))
        trace.advance(DispatchState.BUILT)

        trace.advance(DispatchState.ENCODING)
        try:
            wire_params = codec.encode(request.options, operation)
        except ValidationError as exc:
            return self._finish_failure(trace, exc)

        trace.advance(DispatchState.SENDING)
        try:
            raw = await self._send_with_retry(operation, wire_params, trace)
        except asyncio.CancelledError:
            if trace.state is not DispatchState.DONE:
                trace.advance(DispatchState.DONE)
            raise
        except StsQueryError as exc:
            return self._finish_failure(trace, exc)

        trace.advance(DispatchState.PARSING)
        try:
            parsed = parser.parse_response(raw.body, operation)
        except StsQueryError as exc:
            # ServiceError here means an error envelope inside a 2xx body.
            return self._finish_failure(trace, exc)

        trace.advance(DispatchState.DONE)
        return Success(
            operation=operation.name,
            data=parsed.data,
            request_id=parsed.request_id,
            attempts=trace.attempts,
        )

    async def _send_with_retry(
        self,
        operation: OperationSpec,
        wire_params: Mapping[str, str],
        trace: CallTrace,
    ) -> RawResponse:
        async def attempt() -> RawResponse:
            raw = await self.transport.send(operation.name, wire_params)
            if raw.status_code >= 300:
                raise parser.parse_error(raw.body, raw.status_code)
            return raw

        sending = self.retry_policy.run(
            attempt, on_attempt=trace.record_attempt, label=operation.name
        )
        if self.call_timeout is None:
            return await sending

        try:
            return await asyncio.wait_for(sending, timeout=self.call_timeout)
        except asyncio.TimeoutError as exc:
            raise TransportError(
                f"{operation.name} did not complete within {self.call_timeout:g}s"
            ) from exc

    def _finish_failure(self, trace: CallTrace, error: StsQueryError) -> Failure:
        if trace.state is not DispatchState.DONE:
            trace.advance(DispatchState.DONE)

        if isinstance(error, (ValidationError, ParseError)):
            logger.info("%s failed: %s", trace.operation, error)
        else:
            logger.info(
                "%s failed after %d attempt(s): %s", trace.operation, trace.attempts, error
            )
        return Failure(operation=trace.operation, error=error, attempts=trace.attempts)
