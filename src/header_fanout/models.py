"""Result models for header fan-out.

Examples:
    Inspecting what a pass did::

        from header_fanout.core.normalizer import HeaderNormalizer

        headers = {"Set-Cookie": ["a=1", "b=2"]}
        report = HeaderNormalizer().fanout(headers)

        report.outcome      # FanoutOutcome.FANNED_OUT
        report.value_count  # 2
        report.key_count    # 2
"""

from enum import Enum

from pydantic import BaseModel, Field


class FanoutOutcome(str, Enum):
    """What a normalizer pass did to the target header.

    Attributes:
        NOOP: No value was stored under any spelling of the header.
        NORMALIZED: One value, moved under the lowercase spelling.
        FANNED_OUT: Several values, each under its own case variant.
        OVERFLOW: More values than variants; some keys were overwritten.
    """

    NOOP = "noop"
    NORMALIZED = "normalized"
    FANNED_OUT = "fanned_out"
    OVERFLOW = "overflow"


class FanoutReport(BaseModel):
    """Summary of a single normalizer pass over one header collection.

    Attributes:
        header: Target header name the pass looked for.
        value_count: Values collected across all matching keys.
        key_count: Matching keys present after the pass.
        capacity: Distinct case variants the header name supports.
        collisions: Values overwritten because the capacity ran out.
        outcome: Classification of the pass.
    """

    header: str = Field(..., description="Target header name", examples=["set-cookie"])
    value_count: int = Field(..., ge=0, description="Values collected before redistribution")
    key_count: int = Field(..., ge=0, description="Matching keys after redistribution")
    capacity: int = Field(..., ge=1, description="Distinct case variants available")
    collisions: int = Field(default=0, ge=0, description="Values lost to capacity overflow")
    outcome: FanoutOutcome

    model_config = {"frozen": True}

    @property
    def overflowed(self) -> bool:
        """Whether any value was lost to a key collision."""
        return self.collisions > 0
