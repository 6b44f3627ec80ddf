"""Fan-out of multi-valued headers across case variants.

Many gateways and serverless runtimes hand response headers around as a
plain ``{name: value}`` map. A response carrying several ``Set-Cookie``
lines loses all but one of them on the way through. The normalizer works
around this by storing each value under a different case spelling of the
header name. Exact-key maps keep every spelling as its own entry, and any
HTTP client still reads them all as ``Set-Cookie``.

The pass:
1. Collects values from every key matching the target case-insensitively,
   in key insertion order, then stored order
2. Removes those keys
3. Reinserts each value under ``binary_case(target, position)``

Examples:
    Spreading three cookies::

        from header_fanout.core.normalizer import HeaderNormalizer

        headers = {"Set-Cookie": ["first=tj", "last=holowaychuk", "pet=tobi"]}
        HeaderNormalizer().fix(headers)

        # headers == {
        #     "set-cookie": ["first=tj"],
        #     "Set-cookie": ["last=holowaychuk"],
        #     "sEt-cookie": ["pet=tobi"],
        # }

Note:
    A header name with ``k`` letters has ``2 ** k`` spellings (512 for
    ``set-cookie``). Past that, positions wrap onto existing keys and later
    values overwrite earlier ones. Under the default "wrap" policy this is
    logged and counted; under "raise" it is rejected before any change.
"""

from typing import Literal

from header_fanout.config import FanoutConfig
from header_fanout.exceptions import CapacityExceededError
from header_fanout.models import FanoutOutcome, FanoutReport
from header_fanout.observability.logging import get_logger
from header_fanout.observability.metrics import record_pass
from header_fanout.utils.casing import binary_case, variant_capacity
from header_fanout.utils.headers import HeaderCollection

logger = get_logger(__name__)

DEFAULT_TARGET_HEADER = "set-cookie"

OVERFLOW_POLICIES = ("wrap", "raise")


class HeaderNormalizer:
    """Spreads the values of one header across distinct case variants.

    Attributes:
        target: Lowercased name of the header to fan out
        overflow_policy: "wrap" or "raise", see module notes
        capacity: Number of distinct case variants of ``target``
    """

    def __init__(
        self,
        target: str = DEFAULT_TARGET_HEADER,
        overflow_policy: Literal["wrap", "raise"] = "wrap",
    ) -> None:
        """Initialize the normalizer.

        Args:
            target: Header name to fan out, in any case
            overflow_policy: Behavior when values exceed the capacity

        Raises:
            ValueError: If overflow_policy is not "wrap" or "raise"
        """
        if overflow_policy not in OVERFLOW_POLICIES:
            raise ValueError(
                f"Invalid overflow policy: {overflow_policy!r}. "
                f"Valid policies are: {', '.join(OVERFLOW_POLICIES)}"
            )

        self.target = target.lower()
        self.overflow_policy = overflow_policy
        self.capacity = variant_capacity(self.target)

    @classmethod
    def from_config(cls, config: FanoutConfig) -> "HeaderNormalizer":
        """Build a normalizer from a FanoutConfig."""
        return cls(target=config.target_header, overflow_policy=config.overflow_policy)

    def fix(self, headers: HeaderCollection) -> None:
        """Fan out the target header of ``headers`` in place.

        Afterwards every key matching the target holds exactly one value
        (capacity permitting). Running it again changes nothing.

        Args:
            headers: Header collection owned by the caller

        Raises:
            CapacityExceededError: Only under the "raise" overflow policy
        """
        self.fanout(headers)

    def fanout(self, headers: HeaderCollection) -> FanoutReport:
        """Fan out the target header in place and report what happened.

        Args:
            headers: Header collection owned by the caller

        Returns:
            FanoutReport describing the pass

        Raises:
            CapacityExceededError: Only under the "raise" overflow policy,
                in which case ``headers`` is left unmodified
        """
        matching = [key for key in headers if key.lower() == self.target]

        values: list[str] = []
        for key in matching:
            values.extend(headers[key])

        count = len(values)
        collisions = max(count - self.capacity, 0)

        if collisions and self.overflow_policy == "raise":
            logger.error(
                "headers.fanout.rejected",
                header=self.target,
                value_count=count,
                capacity=self.capacity,
            )
            raise CapacityExceededError(
                message=(
                    f"{count} values for header '{self.target}' exceed "
                    f"its {self.capacity} case variants"
                ),
                header=self.target,
                value_count=count,
                capacity=self.capacity,
            )

        for key in matching:
            del headers[key]

        # Index 0 is the lowercase spelling, so a single value is normalized
        # by the same loop that fans out several
        for position, value in enumerate(values):
            headers[binary_case(self.target, position)] = [value]

        if collisions:
            logger.warning(
                "headers.fanout.capacity_exceeded",
                header=self.target,
                value_count=count,
                capacity=self.capacity,
                collisions=collisions,
            )
            outcome = FanoutOutcome.OVERFLOW
        elif count > 1:
            outcome = FanoutOutcome.FANNED_OUT
        elif count == 1:
            outcome = FanoutOutcome.NORMALIZED
        else:
            outcome = FanoutOutcome.NOOP

        report = FanoutReport(
            header=self.target,
            value_count=count,
            key_count=count - collisions,
            capacity=self.capacity,
            collisions=collisions,
            outcome=outcome,
        )

        if count > 1:
            logger.debug(
                "headers.fanout",
                header=self.target,
                source_keys=matching,
                value_count=count,
                key_count=report.key_count,
            )

        record_pass(report)
        return report


_default_normalizer = HeaderNormalizer()


def fix_multiple_set_cookie(headers: HeaderCollection) -> None:
    """Fan out ``Set-Cookie`` values of ``headers`` in place.

    Shortcut for ``HeaderNormalizer().fix(headers)``.

    Example:
        >>> headers = {"Set-Cookie": ["a=1", "b=2"], "Vary": ["Accept"]}
        >>> fix_multiple_set_cookie(headers)
        >>> headers
        {'Vary': ['Accept'], 'set-cookie': ['a=1'], 'Set-cookie': ['b=2']}
    """
    _default_normalizer.fix(headers)
