"""Request-level logging.

Every tool call gets a unique request_id so a single operation can be
followed through the log from arguments to upstream response.
"""

import logging
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .config import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)


def generate_request_id() -> str:
    """Generate a unique request id."""
    timestamp = datetime.now().strftime("%Y%m%d%H%M%S")
    short_uuid = uuid.uuid4().hex[:8]
    return f"{timestamp}_{short_uuid}"


@dataclass
class RequestContext:
    """Lifecycle record of a single tool call."""
    tool_name: str = ""
    request_id: str = field(default_factory=generate_request_id)
    start_time: float = field(default_factory=time.time)
    endpoint: Optional[str] = None
    events: List[Dict[str, Any]] = field(default_factory=list)

    def elapsed_ms(self) -> int:
        return int((time.time() - self.start_time) * 1000)

    def log_event(self, event_type: str, message: str, **kwargs):
        """Record an event and emit it to the log."""
        event = {
            "type": event_type,
            "message": message,
            "elapsed_ms": self.elapsed_ms(),
            "timestamp": datetime.now().isoformat(),
            **kwargs
        }
        self.events.append(event)

        log_msg = f"[{self.request_id}] [{event_type}] {message}"
        if kwargs:
            details = ", ".join(f"{k}={v}" for k, v in kwargs.items())
            log_msg += f" ({details})"

        if event_type == "error":
            logger.error(log_msg)
        elif event_type == "warning":
            logger.warning(log_msg)
        else:
            logger.info(log_msg)

    def log_start(self, file_count: int):
        self.log_event("request_start", f"Running {self.tool_name}",
                       tool=self.tool_name, file_count=file_count)

    def log_upstream_call(self, endpoint: str, parts: int, size_bytes: int):
        self.endpoint = endpoint
        self.log_event("upstream_call", f"Calling Stirling PDF API: {endpoint}",
                       parts=parts, size_bytes=size_bytes)

    def log_upstream_response(self, size_bytes: int):
        self.log_event("upstream_response", "Stirling PDF API responded",
                       endpoint=self.endpoint, size_bytes=size_bytes)

    def log_error(self, error_code: str, error_message: str):
        self.log_event("error", f"{error_code}: {error_message}",
                       error_code=error_code)

    def log_complete(self, success: bool):
        status = "succeeded" if success else "failed"
        self.log_event("request_complete", f"{self.tool_name} {status}",
                       success=success, total_ms=self.elapsed_ms())
