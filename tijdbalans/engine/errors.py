# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Error taxonomy for the time balance engine."""


class TimeBalanceError(Exception):
    """Base class for recoverable time balance errors."""


class InvalidRequest(TimeBalanceError, ValueError):
    """A compensation request is malformed (no hours, no dates, ...)."""


class InsufficientBalance(TimeBalanceError):
    """A compensation request exceeds what the ledger allows."""

    def __init__(self, requested: float, available: float, message: str) -> None:
        super().__init__(message)
        self.requested = requested
        self.available = available

    @property
    def shortfall(self) -> float:
        """Hours missing to fulfil the request."""
        return max(0.0, self.requested - self.available)


class NotFound(TimeBalanceError, LookupError):
    """A request or user does not exist."""


class RequestAlreadyDecided(TimeBalanceError):
    """A compensation request has already been approved or rejected."""

    def __init__(self, request_id: object, status: str) -> None:
        super().__init__(f"Request {request_id} is already {status}")
        self.request_id = request_id
        self.status = status


class AlreadyApproved(RequestAlreadyDecided):
    """A compensation request has already been approved."""

    def __init__(self, request_id: object) -> None:
        super().__init__(request_id, "approved")
