"""Request schema for the /check endpoint."""

from typing import Any, Dict, List, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
    ValidationInfo,
    field_validator,
)
from pydantic.alias_generators import to_camel

from uptime_probe.domain import MonitorTarget

Number = Union[StrictInt, StrictFloat]


class TargetValidationError(ValueError):
    """Raised when a request body does not describe a valid monitor target."""


class MonitorTargetRequest(BaseModel):
    """A monitor target as sent by the controller, with camelCase field names."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore", allow_inf_nan=False
    )

    id: StrictStr = "unknown"
    name: Optional[StrictStr] = None
    method: StrictStr = "GET"
    target: StrictStr = Field(default="", validate_default=True)
    timeout: Optional[Number] = None
    expected_codes: Optional[List[StrictInt]] = None
    headers: Optional[Dict[str, Union[StrictStr, Number]]] = None
    body: Optional[StrictStr] = None
    response_keyword: Optional[StrictStr] = None
    response_forbidden_keyword: Optional[StrictStr] = None
    ssl_check_enabled: Optional[StrictBool] = None
    ssl_check_days_before_expiry: Optional[Number] = None
    ssl_ignore_self_signed: Optional[StrictBool] = None

    @field_validator("id", "name", "method")
    @classmethod
    def validate_non_empty(cls, v: Optional[str], info: ValidationInfo) -> Optional[str]:
        if v is not None and not v:
            raise ValueError(f"{info.field_name} must be a non-empty string")
        return v

    @field_validator("target")
    @classmethod
    def validate_target(cls, v: str) -> str:
        if not v:
            raise ValueError("target URL is required")
        return v

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError("timeout must be a positive number")
        return v

    @field_validator("ssl_check_days_before_expiry")
    @classmethod
    def validate_days_before_expiry(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v < 0:
            raise ValueError("sslCheckDaysBeforeExpiry must be non-negative")
        return v

    def to_target(self) -> MonitorTarget:
        """Converts the request into the immutable domain model, defaulting the name to the id."""
        return MonitorTarget(
            id=self.id,
            name=self.name or self.id,
            method=self.method,
            target=self.target,
            timeout=self.timeout,
            expected_codes=tuple(self.expected_codes) if self.expected_codes is not None else None,
            headers=(
                {key: str(value) for key, value in self.headers.items()}
                if self.headers is not None
                else None
            ),
            body=self.body,
            response_keyword=self.response_keyword,
            response_forbidden_keyword=self.response_forbidden_keyword,
            ssl_check_enabled=bool(self.ssl_check_enabled),
            ssl_check_days_before_expiry=self.ssl_check_days_before_expiry,
            ssl_ignore_self_signed=bool(self.ssl_ignore_self_signed),
        )


def _first_issue(error: ValidationError) -> str:
    issue = error.errors()[0]
    path = ".".join(str(part) for part in issue.get("loc", ()))
    cause = issue.get("ctx", {}).get("error")
    message = str(cause) if cause is not None else issue.get("msg", "Invalid request body")
    return f"{path}: {message}" if path else message


def parse_monitor_target(payload: Any) -> MonitorTarget:
    """
    Validates a decoded JSON body and builds the corresponding MonitorTarget.

    Args:
        payload: The decoded JSON document.

    Returns:
        MonitorTarget: The validated target.

    Raises:
        TargetValidationError: With a '<field>: <message>' description of the first issue.
    """
    try:
        request = MonitorTargetRequest.model_validate(payload)
    except ValidationError as err:
        raise TargetValidationError(_first_issue(err)) from err
    return request.to_target()
