"""Warning/critical threshold specification and decoding.

A threshold is given on the command line either as a JSON object, e.g.
``{"cpu":[90,70,50],"memory":20,"users_vpn":250}``, or, for CPU-only
checks, as a delimited triple such as ``90,70,50``. Empty text means no
threshold is configured.
"""

import re
from typing import Any, Optional, Tuple

import structlog
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    field_validator,
)

from check_ciscoasa.exceptions import ThresholdDecodeError

logger = structlog.get_logger(__name__)

# First three integers separated by anything non-numeric: "90,70,50",
# "{90/70/50}", "cpu 90 70 50 (5s,1m,5m)"
_CPU_TRIPLE_RE = re.compile(r"(\d+)\D+(\d+)\D+(\d+)")


class ThresholdSpec(BaseModel):
    """Thresholds for one severity tier.

    All comparisons are strict: a CPU value above ``cpu[i]``, a free
    memory percentage below ``memory`` or a session count above
    ``users_vpn`` triggers the tier. A field left as None disables the
    checks that depend on it.

    Attributes:
        cpu: 5 second, 1 minute and 5 minute utilization percentages
        memory: Minimum free memory percentage
        users_vpn: Maximum number of remote access VPN sessions
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    cpu: Optional[Tuple[StrictInt, StrictInt, StrictInt]] = Field(
        default=None, description="CPU usage thresholds [5s, 1m, 5m]"
    )
    memory: Optional[StrictInt] = Field(
        default=None,
        validation_alias=AliasChoices("memory", "free_memory"),
        description="Free memory floor in percent",
    )
    users_vpn: Optional[StrictInt] = Field(
        default=None,
        validation_alias=AliasChoices("users_vpn", "vpn_users"),
        description="Maximum connected VPN users",
    )

    @field_validator("cpu", "memory", "users_vpn", mode="wrap")
    @classmethod
    def drop_invalid_field(
        cls,
        value: Any,
        handler: ValidatorFunctionWrapHandler,
        info: ValidationInfo,
    ) -> Any:
        """Disable a single malformed field instead of rejecting the spec."""
        try:
            return handler(value)
        except ValidationError as e:
            logger.warning(
                "threshold_field_ignored",
                field=info.field_name,
                value=repr(value),
                error=e.errors()[0]["msg"],
            )
            return None

    @property
    def is_empty(self) -> bool:
        return self.cpu is None and self.memory is None and self.users_vpn is None

    def to_json(self) -> str:
        """Serialize back to the JSON threshold syntax."""
        return self.model_dump_json(exclude_none=True)


def decode_threshold(text: str) -> ThresholdSpec:
    """Decode one threshold specification string.

    Args:
        text: JSON object, delimited CPU triple, or empty string

    Returns:
        ThresholdSpec; empty when text is blank

    Raises:
        ThresholdDecodeError: Text is neither a JSON object nor a CPU triple
    """
    stripped = (text or "").strip()
    if not stripped:
        return ThresholdSpec()

    reason = "expected a JSON object or three numbers"
    if stripped.startswith("{"):
        try:
            return ThresholdSpec.model_validate_json(stripped)
        except ValidationError as e:
            # "{90,70,50}" is not JSON but still a CPU triple
            reason = e.errors()[0]["msg"]

    match = _CPU_TRIPLE_RE.search(stripped)
    if match:
        return ThresholdSpec(cpu=tuple(int(v) for v in match.groups()))

    raise ThresholdDecodeError(text, reason)


def load_threshold(text: str, level: str) -> ThresholdSpec:
    """Decode a threshold, treating decode failure as 'not configured'.

    Args:
        text: Raw threshold text from the command line
        level: Tier name used in logs ("warning" or "critical")

    Returns:
        Decoded ThresholdSpec, or an empty one if decoding failed
    """
    try:
        spec = decode_threshold(text)
    except ThresholdDecodeError as e:
        logger.warning("threshold_decode_failed", level=level, reason=e.reason)
        return ThresholdSpec()

    logger.debug("threshold_loaded", level=level, threshold=spec.to_json())
    return spec
