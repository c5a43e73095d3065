"""
Response validation rules for HTTP checks.

This module evaluates an HTTP response against a monitor's acceptance rules:
the expected status codes (or any 2xx status by default) and the optional
required and forbidden body keywords.
"""

from typing import Collection, Optional

import aiohttp

from uptime_probe.domain import MonitorTarget


def validate_status_and_body(
    status: int,
    body: Optional[str] = None,
    expected_codes: Optional[Collection[int]] = None,
    required_keyword: Optional[str] = None,
    forbidden_keyword: Optional[str] = None,
) -> Optional[str]:
    """
    Checks a status code and an optional body against the acceptance rules.

    Rules are evaluated in order and the first failing one wins:
    expected codes (or the 2xx range when none are given), then the required
    keyword, then the forbidden keyword. Keyword rules only apply when a body
    is supplied.

    Args:
        status: The HTTP status code received.
        body: The response body, or None when it was not fetched.
        expected_codes: Status codes considered healthy. Empty means "not set".
        required_keyword: Substring the body must contain (case-sensitive).
        forbidden_keyword: Substring the body must not contain (case-sensitive).

    Returns:
        Optional[str]: The failure message, or None when every rule holds.
    """
    if expected_codes:
        if status not in expected_codes:
            expected = "|".join(str(code) for code in expected_codes)
            return f"Expected status {expected}, got {status}"
    elif status < 200 or status > 299:
        return f"Expected 2xx status, got {status}"

    if body is not None:
        if required_keyword and required_keyword not in body:
            return f'Required keyword "{required_keyword}" not found in response'

        if forbidden_keyword and forbidden_keyword in body:
            return f'Forbidden keyword "{forbidden_keyword}" found in response'

    return None


async def validate_http_response(
    target: MonitorTarget, response: aiohttp.ClientResponse
) -> Optional[str]:
    """
    Validates a live response against the target's rules.

    The body is only read when the status passed and at least one keyword rule
    is configured, so plain status checks never download the payload.

    Args:
        target: The monitor target describing the acceptance rules.
        response: The response whose headers have been received.

    Returns:
        Optional[str]: The failure message, or None when the response is acceptable.
    """
    status_error = validate_status_and_body(response.status, expected_codes=target.expected_codes)
    if status_error:
        return status_error

    if target.response_keyword or target.response_forbidden_keyword:
        body: str = await response.text(errors="replace")
        return validate_status_and_body(
            response.status,
            body,
            expected_codes=target.expected_codes,
            required_keyword=target.response_keyword,
            forbidden_keyword=target.response_forbidden_keyword,
        )

    return None
