from __future__ import annotations

import logging
from typing import Any, Mapping

from pydantic import ValidationError

from .documents import DocumentType
from .models import ValidationResult
from .schemas import TYPED_SCHEMAS, BaseJsonDocument

logger = logging.getLogger(__name__)


class SchemaValidationError(ValueError):
    """Raised when a converted document fails the schema gate."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__(f"Generated JSON is invalid: {', '.join(errors)}")
        self.errors = errors


def format_validation_errors(exc: ValidationError) -> list[str]:
    messages: list[str] = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        messages.append(f"{location}: {error['msg']}")
    return messages


class SchemaValidator:
    def validate_json(
        self, candidate: Mapping[str, Any], document_type: DocumentType | str
    ) -> ValidationResult:
        try:
            BaseJsonDocument.model_validate(candidate)
        except ValidationError as exc:
            return self._failure(format_validation_errors(exc))
        except Exception as exc:
            return self._failure([f"Unexpected validation error: {exc}"])

        # generic and unknown types only have the envelope to satisfy
        schema = TYPED_SCHEMAS.get(self._type_key(document_type), BaseJsonDocument)
        try:
            schema.model_validate(candidate)
        except ValidationError as exc:
            return self._failure(format_validation_errors(exc))
        except Exception as exc:
            return self._failure([f"Unexpected validation error: {exc}"])
        return ValidationResult(success=True)

    def _type_key(self, document_type: DocumentType | str) -> str:
        if isinstance(document_type, DocumentType):
            return document_type.value
        return str(document_type)

    def _failure(self, errors: list[str]) -> ValidationResult:
        logger.debug("Schema validation failed: %s", "; ".join(errors))
        return ValidationResult(success=False, errors=errors)


__all__ = ["SchemaValidator", "SchemaValidationError", "format_validation_errors"]
