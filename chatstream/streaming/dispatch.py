"""
chatstream - Event Dispatch

Minimal synchronous driver between a transport and a parser.

The transport owns reading frames and retry policy; this module only:
- extracts ``data:`` payloads from SSE lines
- stops at the end marker (``[DONE]`` by default)
- stops after an upstream error ended the session
- turns a fatal parser error into a terminating issue whose symbol
  (DIALECT_ERROR) differs from upstream-reported failures (GENERIC)
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Union

from ..config import get_done_marker, is_metrics_enabled
from ..core.errors import ChatStreamException
from ..observability.logging import LogContext, get_logger
from ..observability.metrics import MetricsCollector, get_metrics
from .errors import IssueSymbol
from .normalizer import ChatCompletionsChunkParser
from .response import ChatCompletionsResponseParser
from .transmitter import PartTransmitter

logger = get_logger(__name__)


@dataclass
class StreamOutcome:
    """How a dispatched stream ended."""
    events_processed: int = 0
    done: bool = False
    terminated: bool = False
    error: Optional[ChatStreamException] = None

    @property
    def ok(self) -> bool:
        """True if no upstream issue and no parser error ended the stream."""
        return self.error is None and not self.terminated


def iter_sse_data(lines: Iterable[Union[str, bytes]]) -> Iterator[str]:
    """
    Yield the payload of each ``data:`` line.

    Comments (``:``), blank lines, other SSE fields and empty keep-alive
    payloads are skipped.
    """
    for line in lines:
        if isinstance(line, bytes):
            line = line.decode("utf-8")
        line = line.rstrip("\r\n")

        if not line.startswith("data:"):
            continue

        data = line[5:]
        if data.startswith(" "):
            data = data[1:]
        if data.strip():
            yield data


def _dialect_failure_message(dialect: str, error: ChatStreamException) -> str:
    return f"{dialect} response could not be understood ({error.code}): {error}"


def dispatch_stream(
    parser: ChatCompletionsChunkParser,
    transmitter: PartTransmitter,
    payloads: Iterable[str],
    done_marker: Optional[str] = None,
    raise_errors: bool = False,
    request_id: str = "",
    metrics: Optional[MetricsCollector] = None
) -> StreamOutcome:
    """
    Feed streamed payloads to a chunk parser, in order.

    Args:
        parser: A fresh chunk parser (one per completion)
        transmitter: Sink receiving normalized parts
        payloads: Raw ``data:`` payloads (see iter_sse_data)
        done_marker: End marker (defaults to CHATSTREAM_DONE_MARKER)
        raise_errors: Propagate fatal parser errors instead of surfacing them
        request_id: Correlation id for logs

    Returns:
        StreamOutcome describing how the stream ended
    """
    marker = done_marker or get_done_marker()
    if metrics is None and is_metrics_enabled():
        metrics = get_metrics()

    outcome = StreamOutcome()
    previous_ctx = LogContext.get_current()
    LogContext.set_current(LogContext(request_id=request_id, dialect=parser.dialect))

    try:
        for payload in payloads:
            if payload.strip() == marker:
                outcome.done = True
                break

            outcome.events_processed += 1
            try:
                parser.parse(transmitter, payload)
            except ChatStreamException as e:
                outcome.error = e
                logger.error(
                    "Chunk parser failed",
                    code=e.code,
                    error_type=e.error.type.value,
                    error=str(e),
                    events_processed=outcome.events_processed,
                )
                if raise_errors:
                    raise
                if metrics:
                    metrics.record_terminating_issue(
                        dialect=parser.dialect, symbol=IssueSymbol.DIALECT_ERROR.value
                    )
                transmitter.set_dialect_terminating_issue(
                    _dialect_failure_message(parser.dialect, e),
                    IssueSymbol.DIALECT_ERROR,
                )
                break

            if parser.terminated:
                outcome.terminated = True
                break
    finally:
        LogContext.set_current(previous_ctx)

    return outcome


def dispatch_response(
    parser: ChatCompletionsResponseParser,
    transmitter: PartTransmitter,
    body: str,
    raise_errors: bool = False,
    request_id: str = "",
    metrics: Optional[MetricsCollector] = None
) -> StreamOutcome:
    """
    Feed a complete response body to a response parser.

    Fatal parser errors are handled the same way as in dispatch_stream.
    """
    if metrics is None and is_metrics_enabled():
        metrics = get_metrics()

    outcome = StreamOutcome(events_processed=1, done=True)
    previous_ctx = LogContext.get_current()
    LogContext.set_current(LogContext(request_id=request_id, dialect=parser.dialect))

    try:
        parser.parse(transmitter, body)
    except ChatStreamException as e:
        outcome.error = e
        logger.error(
            "Response parser failed",
            code=e.code,
            error_type=e.error.type.value,
            error=str(e),
        )
        if raise_errors:
            raise
        if metrics:
            metrics.record_terminating_issue(
                dialect=parser.dialect, symbol=IssueSymbol.DIALECT_ERROR.value
            )
        transmitter.set_dialect_terminating_issue(
            _dialect_failure_message(parser.dialect, e),
            IssueSymbol.DIALECT_ERROR,
        )
    finally:
        LogContext.set_current(previous_ctx)

    return outcome
