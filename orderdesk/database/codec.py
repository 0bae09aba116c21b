"""
Record encoding between models and store records.

Timestamps are written as ISO 8601 text and parsed back into datetime
objects, so a round trip through any store is lossless.
"""

from typing import Iterable, List, Type, TypeVar

from pydantic import BaseModel

from .store import Record

ModelT = TypeVar("ModelT", bound=BaseModel)


def encode_record(model: BaseModel) -> Record:
    """Serialize a model into a JSON-compatible record."""
    return model.model_dump(mode="json")


def encode_records(models: Iterable[BaseModel]) -> List[Record]:
    """Serialize models into records, preserving order."""
    return [encode_record(model) for model in models]


def decode_record(model_cls: Type[ModelT], record: Record) -> ModelT:
    """Rebuild a model from a stored record."""
    return model_cls.model_validate(record)


def decode_records(model_cls: Type[ModelT], records: Iterable[Record]) -> List[ModelT]:
    """Rebuild models from stored records, preserving order."""
    return [decode_record(model_cls, record) for record in records]
