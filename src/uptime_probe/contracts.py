"""
Core interfaces for the uptime probe.

This module defines the abstract base classes that form the seams of the
probe's architecture. Checkers and location resolvers are injected where they
are needed, which keeps the dispatcher and the API layer free of network code
and lets tests substitute them.
"""

import abc

from .domain import CheckResult, MonitorTarget


class TargetChecker(abc.ABC):
    """
    Abstract interface for a component that performs the check for a single target.

    Its responsibility is to encapsulate the network I/O for one kind of probe
    and return a structured result.
    """

    @abc.abstractmethod
    async def check(self, target: MonitorTarget) -> CheckResult:
        """
        Probes the given target once.

        Args:
            target: The MonitorTarget to check.

        Returns:
            CheckResult: CheckSuccess or CheckFailure describing the outcome.

        Raises:
            Exception: Implementations should handle network errors internally and
                report them as a CheckFailure rather than raising them.
        """
        pass


class LocationResolver(abc.ABC):
    """
    Abstract interface for a component that names where this probe instance runs.

    The resolved value is attached to every check response by the API layer;
    the checkers never see it.
    """

    @abc.abstractmethod
    async def resolve(self) -> str:
        """
        Returns the location string for this instance.

        Implementations must not raise: when nothing can be determined they
        return a placeholder value.

        Returns:
            str: A short location label, e.g. an airport code or "City, CC".
        """
        pass
