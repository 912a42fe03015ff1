from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

from .errors import InputInvalid

BUNDLED_SCHEMAS_DIR = Path(__file__).parent / "schemas"

REQUEST_SCHEMA = "request.schema.json"
CONTEXT_SCHEMA = "context.schema.json"
RUNTIME_CONFIG_SCHEMA = "runtime_config.schema.json"


@dataclass(frozen=True)
class SchemaRegistry:
    schemas_base_dir: Path = BUNDLED_SCHEMAS_DIR
    _cache: dict[str, Draft202012Validator] = field(default_factory=dict, compare=False, repr=False)

    def validator(self, schema_filename: str) -> Draft202012Validator:
        cached = self._cache.get(schema_filename)
        if cached is not None:
            return cached
        schema_path = self.schemas_base_dir / schema_filename
        schema = json.loads(schema_path.read_text(encoding="utf-8"))
        validator = Draft202012Validator(schema)
        self._cache[schema_filename] = validator
        return validator

    def validate(self, document: Any, schema_filename: str) -> None:
        try:
            self.validator(schema_filename).validate(document)
        except ValidationError as e:
            where = "/".join(str(p) for p in e.absolute_path) or "<root>"
            raise InputInvalid(code="INPUT_INVALID", message=f"{schema_filename} at {where}: {e.message}") from e

    def validate_invocation(self, request: Any, context: Any) -> None:
        self.validate(request, REQUEST_SCHEMA)
        self.validate(context, CONTEXT_SCHEMA)
