"""
Check dispatcher for the uptime probe.

This module routes a monitor target to the checker that matches its declared
method and guarantees that every check ends with a CheckResult, whatever
happens inside the checker.
"""

import logging

from .contracts import TargetChecker
from .domain import TCP_PING_METHOD, CheckKind, CheckResult, HttpMethod, MonitorTarget, failure
from .errors import error_message

# Module logger
logger = logging.getLogger(__name__)

_HTTP_METHODS = frozenset(method.value for method in HttpMethod)


def resolve_check_kind(method: str) -> CheckKind:
    """
    Maps a declared method to the kind of probe that serves it.

    'TCP_PING' selects the TCP probe and the HTTP verbs select the HTTP probe.
    Any other method is assumed to be an HTTP verb as well. Matching is case-sensitive.

    Args:
        method: The method string of a monitor target.

    Returns:
        CheckKind: The probe to run.
    """
    if method == TCP_PING_METHOD:
        return CheckKind.TCP_PING
    if method in _HTTP_METHODS:
        return CheckKind.HTTP

    logger.info(f"Unknown method, defaulting to HTTP: {method}")
    return CheckKind.HTTP


class CheckDispatcher:
    """
    Routes monitor targets to the HTTP or TCP checker.

    The dispatcher is the outer boundary of the check-execution core: it never
    raises, and anything a checker lets escape is reported as an unexpected error.
    """

    def __init__(self, http_checker: TargetChecker, tcp_checker: TargetChecker) -> None:
        """
        Initializes the dispatcher with one checker per probe kind.

        Args:
            http_checker: Checker used for HTTP verbs and unknown methods.
            tcp_checker: Checker used for the 'TCP_PING' pseudo-method.
        """
        self._checkers = {
            CheckKind.HTTP: http_checker,
            CheckKind.TCP_PING: tcp_checker,
        }

    async def dispatch(self, target: MonitorTarget) -> CheckResult:
        """
        Runs exactly one check for the target.

        Args:
            target: The monitor target to probe.

        Returns:
            CheckResult: The checker's result, or a CheckFailure without latency
                when the target is empty or the checker raised.
        """
        if not target.target:
            logger.info(f"Rejecting target {target.id}: empty target")
            return failure("Target must be a non-empty string")

        checker = self._checkers[resolve_check_kind(target.method)]

        try:
            return await checker.check(target)
        except Exception as e:
            message = error_message(e)
            logger.exception(f"Unexpected error checking {target.name}: {message}")
            return failure(f"Unexpected error: {message}")
