"""Capability check guarding threshold commits to durable storage"""

import hmac

from westgate_analytics.domain.exceptions import ThresholdWriteForbiddenError


def authorize_threshold_write(provided_key: str | None, expected_key: str) -> None:
    """
    Raise unless the caller holds the threshold write key.

    An empty expected key means writes are disabled for this deployment.
    """
    if not expected_key:
        raise ThresholdWriteForbiddenError("Threshold writes are disabled")
    if not provided_key or not hmac.compare_digest(provided_key.encode(), expected_key.encode()):
        raise ThresholdWriteForbiddenError("Invalid threshold write key")
