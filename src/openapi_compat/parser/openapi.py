"""OpenAPI / Swagger contract loader.

Parses OpenAPI 3.x and Swagger 2.0 documents (YAML or JSON) into a
ContractDocument. Only paths, operations, parameters and response codes
are extracted; descriptions, examples, security schemes and the like
are ignored.
"""

import json
import logging
from pathlib import Path

import yaml

from openapi_compat.errors import SpecNotFoundError, SpecParseError

from .base import (
    HTTP_METHODS,
    PARAM_LOCATIONS,
    ContractDocument,
    Operation,
    Parameter,
    PathItem,
    ResponseSpec,
)
from .detect import SWAGGER2, UNKNOWN, detect_kind

logger = logging.getLogger(__name__)


def load(file_path: Path) -> ContractDocument:
    """Load an OpenAPI/Swagger file into a ContractDocument.

    Raises SpecNotFoundError if the file is missing and SpecParseError if it
    is not valid YAML/JSON or does not have the expected OpenAPI shape.
    """
    file_path = Path(file_path)
    if not file_path.is_file():
        raise SpecNotFoundError(file_path)

    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SpecParseError(file_path, str(e)) from e

    doc = _parse_text(file_path, text)

    try:
        contract = parse_contract(doc)
    except ValueError as e:
        raise SpecParseError(file_path, str(e)) from e

    logger.info("Loaded OpenAPI spec: %s v%s (%s)", contract.title, contract.version, file_path)
    return contract


def parse_contract(doc: object) -> ContractDocument:
    """Convert an already-parsed document into a ContractDocument.

    Raises ValueError (pydantic's ValidationError included) when the
    document is structurally malformed.
    """
    if not isinstance(doc, dict):
        raise ValueError("document root must be a mapping")

    kind = detect_kind(doc)
    if kind == UNKNOWN:
        logger.warning("Document declares neither 'openapi' nor 'swagger'; reading it as OpenAPI 3")

    paths = doc.get("paths") or {}
    if not isinstance(paths, dict):
        raise ValueError("'paths' must be a mapping")

    info = doc.get("info")
    if not isinstance(info, dict):
        info = {}

    items = {}
    for path, raw_item in paths.items():
        path = str(path)
        items[path] = _parse_path_item(path, raw_item, doc, kind)

    return ContractDocument(
        title=str(info.get("title", "")),
        version=str(info.get("version", "")),
        paths=items,
    )


def _parse_text(file_path: Path, text: str) -> object:
    # YAML is a superset of JSON, but tab-indented JSON trips the YAML scanner.
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as yaml_error:
        try:
            return json.loads(text)
        except ValueError:
            raise SpecParseError(file_path, f"invalid YAML/JSON: {yaml_error}") from yaml_error


def _parse_path_item(path: str, raw: object, doc: dict, kind: str) -> PathItem:
    raw = _resolve(raw, doc) if raw is not None else {}
    if not isinstance(raw, dict):
        raise ValueError(f"path item {path} must be a mapping")

    shared = _parse_parameters(raw.get("parameters"), doc, kind, where=path)

    operations = {}
    for method, raw_op in raw.items():
        method = str(method).upper()
        if method not in HTTP_METHODS:
            continue
        where = f"{method} {path}"
        if not isinstance(raw_op, dict):
            raise ValueError(f"operation {where} must be a mapping")

        own = _parse_parameters(raw_op.get("parameters"), doc, kind, where=where)
        operations[method] = Operation(
            method=method,
            parameters=_merge_parameters(shared, own),
            responses=_parse_responses(raw_op.get("responses"), where),
        )

    return PathItem(path=path, operations=operations)


def _parse_parameters(raw_params: object, doc: dict, kind: str, where: str) -> list[Parameter]:
    if raw_params is None:
        return []
    if not isinstance(raw_params, list):
        raise ValueError(f"parameters of {where} must be a list")

    result = []
    for raw in raw_params:
        p = _resolve(raw, doc)
        if not isinstance(p, dict) or "name" not in p or "in" not in p:
            raise ValueError(f"every parameter of {where} needs 'name' and 'in'")

        location = p["in"]
        if location not in PARAM_LOCATIONS:
            # Swagger 2.0 body/formData parameters describe payloads, not inputs we match.
            logger.debug("Skipping %s parameter %r of %s", location, p["name"], where)
            continue

        required = p.get("required", location == "path")
        if not isinstance(required, bool):
            raise ValueError(f"'required' of parameter {p['name']} in {where} must be a boolean")

        schema = p if kind == SWAGGER2 else _param_schema(p)
        result.append(
            Parameter(
                name=str(p["name"]),
                location=location,
                required=required,
                schema_type=_schema_type(schema, doc),
            )
        )
    return result


def _merge_parameters(shared: list[Parameter], own: list[Parameter]) -> tuple[Parameter, ...]:
    """Path-level parameters apply to every operation unless the operation redefines them."""
    merged = {p.key: p for p in shared}
    for p in own:
        merged[p.key] = p
    return tuple(merged.values())


def _param_schema(param: dict) -> object:
    if "schema" in param:
        return param["schema"]
    content = param.get("content")
    if isinstance(content, dict):
        for media in content.values():
            if isinstance(media, dict):
                return media.get("schema")
    return None


def _schema_type(schema: object, doc: dict) -> str:
    schema = _resolve(schema, doc)
    if not isinstance(schema, dict):
        return "unknown"

    schema_type = schema.get("type")
    if isinstance(schema_type, list):
        return "|".join(sorted(str(t) for t in schema_type))
    if schema_type:
        return str(schema_type)
    if "properties" in schema:
        return "object"
    if "items" in schema:
        return "array"
    return "unknown"


def _parse_responses(raw: object, where: str) -> dict[str, ResponseSpec]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError(f"responses of {where} must be a mapping")

    result = {}
    for status_code, resp in raw.items():
        code = str(status_code)
        description = resp.get("description", "") if isinstance(resp, dict) else ""
        result[code] = ResponseSpec(status_code=code, description=str(description or ""))
    return result


def _resolve(node: object, doc: dict) -> object:
    """Follow local '$ref' pointers ('#/components/...', '#/definitions/...')."""
    seen = set()
    while isinstance(node, dict) and "$ref" in node:
        ref = node["$ref"]
        if not isinstance(ref, str) or not ref.startswith("#/"):
            raise ValueError(f"unsupported reference {ref!r}: only local '#/' references are resolved")
        if ref in seen:
            raise ValueError(f"circular reference {ref}")
        seen.add(ref)
        node = _lookup(ref, doc)
    return node


def _lookup(ref: str, doc: dict) -> object:
    target = doc
    for token in ref[2:].split("/"):
        token = token.replace("~1", "/").replace("~0", "~")
        if isinstance(target, list) and token.isdigit() and int(token) < len(target):
            target = target[int(token)]
        elif isinstance(target, dict) and token in target:
            target = target[token]
        else:
            raise ValueError(f"unresolvable reference {ref}")
    return target
