"""
statement_fetcher/workflows package marker.
"""

from statement_fetcher.workflows.base import (
    BrowserSession,
    CaptureTimeoutError,
    CarrierWorkflow,
    ObservedElement,
    ResponseCapture,
)
from statement_fetcher.workflows.dispatcher import WorkflowDispatcher
from statement_fetcher.workflows.identifier import KNOWN_CARRIERS, UNKNOWN_CARRIER, identify_carrier
from statement_fetcher.workflows.registry import WorkflowRegistry
from statement_fetcher.workflows.session import (
    BrowserSessionError,
    BrowserSessionProvider,
    StagehandSessionProvider,
)

__all__ = [
    "KNOWN_CARRIERS",
    "UNKNOWN_CARRIER",
    "BrowserSession",
    "BrowserSessionError",
    "BrowserSessionProvider",
    "CaptureTimeoutError",
    "CarrierWorkflow",
    "ObservedElement",
    "ResponseCapture",
    "StagehandSessionProvider",
    "WorkflowDispatcher",
    "WorkflowRegistry",
    "identify_carrier",
]
