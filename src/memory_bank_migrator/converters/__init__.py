from __future__ import annotations

from typing import Dict, Mapping

from .active_context import ActiveContextConverter
from .base import BaseConverter, ConversionError, Converter
from .branch_context import BranchContextConverter
from .generic import GenericConverter
from .progress import ProgressConverter
from .system_patterns import SystemPatternsConverter
from ..documents import DocumentType

_CONVERTER_CLASSES: Dict[DocumentType, type[BaseConverter]] = {
    DocumentType.BRANCH_CONTEXT: BranchContextConverter,
    DocumentType.ACTIVE_CONTEXT: ActiveContextConverter,
    DocumentType.PROGRESS: ProgressConverter,
    DocumentType.SYSTEM_PATTERNS: SystemPatternsConverter,
    DocumentType.GENERIC: GenericConverter,
}


class ConverterNotFoundError(KeyError):
    """Raised when not even the generic fallback converter is registered."""


class ConverterRegistry:
    """Maps document types to converters, falling back to the generic one."""

    def __init__(self, converters: Mapping[DocumentType | str, Converter] | None = None) -> None:
        self._converters: dict[str, Converter] = {
            document_type.value: converter_cls() for document_type, converter_cls in _CONVERTER_CLASSES.items()
        }
        for document_type, converter in (converters or {}).items():
            self.register_converter(document_type, converter)

    def register_converter(self, document_type: DocumentType | str, converter: Converter) -> None:
        self._converters[_key(document_type)] = converter

    def unregister_converter(self, document_type: DocumentType | str) -> Converter | None:
        return self._converters.pop(_key(document_type), None)

    def get_converter(self, document_type: DocumentType | str) -> Converter:
        converter = self._converters.get(_key(document_type))
        if converter is not None:
            return converter
        fallback = self._converters.get(DocumentType.GENERIC.value)
        if fallback is None:
            raise ConverterNotFoundError(
                f"No converter registered for {_key(document_type)} and no generic fallback"
            )
        return fallback

    @property
    def registered_types(self) -> list[str]:
        return list(self._converters)


def _key(document_type: DocumentType | str) -> str:
    if isinstance(document_type, DocumentType):
        return document_type.value
    return str(document_type)


__all__ = [
    "BaseConverter",
    "ConversionError",
    "Converter",
    "ConverterNotFoundError",
    "ConverterRegistry",
    "ActiveContextConverter",
    "BranchContextConverter",
    "GenericConverter",
    "ProgressConverter",
    "SystemPatternsConverter",
]
