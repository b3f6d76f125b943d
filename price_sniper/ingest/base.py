"""Shared types and errors for a sniper run."""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional


class TrackingStatus(str, Enum):
    TRACKING = "tracking"
    NOT_TRACKING = "not-tracking"


class DeviceClass(str, Enum):
    MOBILE = "mobile"
    DESKTOP = "desktop"


class Availability(str, Enum):
    IN_STOCK = "in-stock"
    OUT_OF_STOCK = "out-of-stock"
    UNKNOWN = "unknown"


class CheckStage(str, Enum):
    """Stages a single target moves through during a run."""

    PENDING = "pending"
    IDENTITY_ASSIGNED = "identity-assigned"
    NAVIGATED = "navigated"
    DELAYED = "delayed"
    EXTRACTED = "extracted"
    RECONCILED = "reconciled"
    FAILED = "failed"


# =============================================================================
# Errors
# =============================================================================

class SniperError(Exception):
    """Base class for sniper errors."""


class RegistryUnavailableError(SniperError):
    """The target registry could not be read. Fatal for the run."""


class NavigationError(SniperError):
    """Page could not be loaded for a target."""

    def __init__(self, kind: str, url: str, reason: str):
        self.kind = kind  # 'timeout', 'network' or 'locator'
        self.url = url
        self.reason = reason
        super().__init__(f"{kind} loading {url or '<no locator>'}: {reason}")


class StorageError(SniperError):
    """Writing a check result to the registry failed."""


# =============================================================================
# Data
# =============================================================================

@dataclass(frozen=True)
class TrackedTarget:
    """A listing loaded from the registry. Read-only for the whole run."""

    id: int
    locator: str
    display_name: str


@dataclass(frozen=True)
class Viewport:
    width: int
    height: int


@dataclass(frozen=True)
class BrowsingIdentity:
    """Simulated device fingerprint for a single page visit."""

    device_class: DeviceClass
    user_agent: str
    viewport: Viewport
    locale: str
    timezone_id: str

    @property
    def is_mobile(self) -> bool:
        return self.device_class is DeviceClass.MOBILE

    def to_context_options(self) -> Dict[str, Any]:
        """Playwright ``browser.new_context`` keyword arguments."""
        return {
            "user_agent": self.user_agent,
            "viewport": {"width": self.viewport.width, "height": self.viewport.height},
            "screen": {"width": self.viewport.width, "height": self.viewport.height},
            "locale": self.locale,
            "timezone_id": self.timezone_id,
            "is_mobile": self.is_mobile,
            "has_touch": self.is_mobile,
        }


@dataclass(frozen=True)
class ExtractionResult:
    """Price and availability read from a page. ``price`` is None if not found."""

    price: Optional[Decimal]
    availability: Availability = Availability.UNKNOWN


@dataclass
class CheckOutcome:
    """Result of checking one target, for run-level reporting."""

    target_id: int
    display_name: str
    succeeded: bool
    failure_reason: Optional[str] = None
    stage: CheckStage = CheckStage.PENDING
    failed_after: Optional[CheckStage] = None  # Last stage reached before failing
    price: Optional[Decimal] = None
    availability: Availability = Availability.UNKNOWN

    @classmethod
    def failure(
        cls,
        target: TrackedTarget,
        reason: str,
        failed_after: Optional[CheckStage] = None,
    ) -> "CheckOutcome":
        return cls(
            target_id=target.id,
            display_name=target.display_name,
            succeeded=False,
            failure_reason=reason,
            stage=CheckStage.FAILED,
            failed_after=failed_after,
        )


@dataclass
class BatchSummary:
    """Outcomes of a whole run."""

    outcomes: List[CheckOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.succeeded)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if not o.succeeded)

    @property
    def total(self) -> int:
        return len(self.outcomes)
