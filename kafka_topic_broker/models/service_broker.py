"""Service broker data models."""

from pydantic import BaseModel, Field, field_validator
from typing import Dict, Any, Optional
from enum import Enum

# Reserved parameter key holding the topic backing a service instance
TOPIC_NAME_KEY = "topicName"

PARAMETER_SCALAR_TYPES = (str, int, float, bool)


def check_parameter_value(key: str, value: Any) -> None:
    """Validate one parameter value: string, number, boolean or nested mapping."""
    if isinstance(value, dict):
        for nested_key, nested_value in value.items():
            if not isinstance(nested_key, str):
                raise ValueError(f"parameter '{key}' has a non-string key: {nested_key!r}")
            check_parameter_value(f"{key}.{nested_key}", nested_value)
    elif not isinstance(value, PARAMETER_SCALAR_TYPES):
        raise ValueError(
            f"parameter '{key}' must be a string, number, boolean or mapping, "
            f"got {type(value).__name__}"
        )


class ParameterizedModel(BaseModel):
    """Base for models carrying a free-form parameter mapping."""
    parameters: Dict[str, Any] = Field(default_factory=dict, description="Free-form parameters")

    @field_validator('parameters', mode='before')
    @classmethod
    def validate_parameters(cls, v):
        """Validate parameter values against the supported value types."""
        if v is None:
            return {}
        if not isinstance(v, dict):
            raise ValueError("parameters must be a mapping")

        for key, value in v.items():
            if not isinstance(key, str):
                raise ValueError(f"parameter keys must be strings, got {key!r}")
            check_parameter_value(key, value)

        if TOPIC_NAME_KEY in v:
            topic_name = v[TOPIC_NAME_KEY]
            if not isinstance(topic_name, str) or not topic_name:
                raise ValueError(f"{TOPIC_NAME_KEY} must be a non-empty string")

        return v


class ServiceInstance(ParameterizedModel):
    """Service instance handed to the broker by the front end."""
    id: str = Field(..., description="Unique instance identifier", min_length=1)
    service_id: Optional[str] = Field(None, description="Service identifier")
    plan_id: Optional[str] = Field(None, description="Service plan identifier")
    organization_guid: Optional[str] = Field(None, description="Organization GUID")
    space_guid: Optional[str] = Field(None, description="Space GUID")

    @property
    def topic_name(self) -> Optional[str]:
        return self.parameters.get(TOPIC_NAME_KEY)


class ServiceBinding(ParameterizedModel):
    """Binding of a consuming application to a service instance."""
    id: str = Field(..., description="Unique binding identifier", min_length=1)
    app_guid: Optional[str] = Field(None, description="GUID of the bound application")


class OperationKind(str, Enum):
    """Lifecycle operations reported in an OperationResult."""
    CREATE = "create"
    DELETE = "delete"
    UPDATE = "update"
    BIND = "bind"
    UNBIND = "unbind"


class OperationStatus(str, Enum):
    """Terminal status of a lifecycle operation."""
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class OperationResult(BaseModel):
    """Outcome of a single lifecycle call."""
    operation: OperationKind = Field(..., description="Lifecycle operation")
    status: OperationStatus = Field(..., description="Terminal status")
    message: str = Field(..., description="Human-readable outcome")

    @classmethod
    def success(cls, operation: OperationKind, message: str) -> 'OperationResult':
        return cls(operation=operation, status=OperationStatus.SUCCEEDED, message=message)

    @classmethod
    def failure(cls, operation: OperationKind, message: str) -> 'OperationResult':
        return cls(operation=operation, status=OperationStatus.FAILED, message=message)

    @property
    def is_success(self) -> bool:
        return self.status == OperationStatus.SUCCEEDED


class CredentialSet(BaseModel):
    """Credentials returned to an application on bind."""
    hostname: str = Field(..., description="Kafka bootstrap servers")
    topicName: str = Field(..., description="Topic backing the instance")
    uri: str = Field(..., description="kafka://<hostname>/<topicName>")


class ProvisionRequest(ParameterizedModel):
    """Service instance provisioning request."""
    service_id: str = Field(..., description="ID of the service being provisioned")
    plan_id: str = Field(..., description="ID of the plan being provisioned")
    context: Optional[Dict[str, Any]] = None
    organization_guid: Optional[str] = None
    space_guid: Optional[str] = None


class UpdateRequest(ParameterizedModel):
    """Service instance update request."""
    service_id: str = Field(..., description="ID of the service")
    plan_id: Optional[str] = None
    context: Optional[Dict[str, Any]] = None
    previous_values: Optional[Dict[str, Any]] = None


class BindRequest(ParameterizedModel):
    """Service binding request."""
    service_id: str = Field(..., description="ID of the service")
    plan_id: str = Field(..., description="ID of the plan")
    app_guid: Optional[str] = None
    bind_resource: Optional[Dict[str, Any]] = None
    context: Optional[Dict[str, Any]] = None

    @property
    def resolved_app_guid(self) -> Optional[str]:
        """App GUID from the request, falling back to bind_resource.app_guid."""
        if self.app_guid:
            return self.app_guid
        if self.bind_resource:
            return self.bind_resource.get('app_guid')
        return None


class BindResponse(BaseModel):
    """Service binding response."""
    credentials: Dict[str, Any] = Field(..., description="Binding credentials")


class ErrorResponse(BaseModel):
    """Error response."""
    error: str = Field(..., description="Error code")
    description: str = Field(..., description="Error description")
