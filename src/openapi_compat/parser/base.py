"""Normalized contract model.

The loader converts OpenAPI 3.x and Swagger 2.0 documents into these
models; the comparator only ever sees this representation. Models are
frozen and their mappings are read-only views, so a loaded contract
cannot change after load.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, PlainSerializer

HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH")

PARAM_LOCATIONS = ("path", "query", "header", "cookie")


def _read_only(value: Mapping) -> Mapping:
    return MappingProxyType(dict(value))


class _ContractModel(BaseModel):
    model_config = ConfigDict(frozen=True, validate_default=True)


class Parameter(_ContractModel):
    """A single operation parameter, identified by (location, name)."""

    name: str
    location: str  # path / query / header / cookie
    required: bool = False
    schema_type: str = "unknown"  # string / integer / object / string|null ...

    @property
    def key(self) -> tuple[str, str]:
        return (self.location, self.name)


class ResponseSpec(_ContractModel):
    """A declared response; only its status code takes part in comparison."""

    status_code: str
    description: str = ""


class Operation(_ContractModel):
    method: str  # GET / POST / PUT / DELETE / PATCH
    parameters: tuple[Parameter, ...] = ()
    responses: Annotated[Mapping[str, ResponseSpec], AfterValidator(_read_only), PlainSerializer(dict)] = {}

    def parameter_map(self) -> dict[tuple[str, str], Parameter]:
        return {p.key: p for p in self.parameters}


class PathItem(_ContractModel):
    """All operations declared under one path template."""

    path: str  # /users/{id}
    operations: Annotated[Mapping[str, Operation], AfterValidator(_read_only), PlainSerializer(dict)] = {}

    def operation(self, method: str) -> Operation | None:
        return self.operations.get(method.upper())


class ContractDocument(_ContractModel):
    """Root of a loaded contract. Path order follows the source document."""

    title: str = ""
    version: str = ""
    paths: Annotated[Mapping[str, PathItem], AfterValidator(_read_only), PlainSerializer(dict)] = {}
