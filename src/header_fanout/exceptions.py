"""Custom exceptions for header fan-out.

The core operations are total: with the default ``"wrap"`` overflow policy
nothing in the fan-out path raises. These exceptions exist for the opt-in
strict mode, where running out of case variants is treated as an error
instead of a logged collision.

Examples:
    Rejecting responses that would lose cookies::

        from header_fanout.core.normalizer import HeaderNormalizer
        from header_fanout.exceptions import CapacityExceededError

        normalizer = HeaderNormalizer(overflow_policy="raise")

        try:
            normalizer.fix(headers)
        except CapacityExceededError as e:
            logger.error("Too many cookies for one response", error=str(e))
            return Response(status_code=500)
"""


class HeaderFanoutError(Exception):
    """Base exception for all header fan-out errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        """Initialize the exception with a message.

        Args:
            message: Human-readable error description.
        """
        self.message = message
        super().__init__(message)


class CapacityExceededError(HeaderFanoutError):
    """More values than the target header has case variants.

    Raised only under ``overflow_policy="raise"``, before the header
    collection is modified, so the caller still holds the original headers.

    Attributes:
        message: Human-readable error description.
        header: The target header name.
        value_count: Number of values found for the header.
        capacity: Number of distinct case variants available.

    Examples:
        Raising a capacity error::

            if count > capacity:
                raise CapacityExceededError(
                    message=f"{count} values exceed {capacity} variants",
                    header=self.target,
                    value_count=count,
                    capacity=capacity,
                )
    """

    def __init__(self, message: str, header: str, value_count: int, capacity: int) -> None:
        """Initialize the capacity error with details.

        Args:
            message: Human-readable error description.
            header: The target header name.
            value_count: Number of values found for the header.
            capacity: Number of distinct case variants available.
        """
        super().__init__(message)
        self.header = header
        self.value_count = value_count
        self.capacity = capacity
