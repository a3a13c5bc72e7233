from typing import Iterable, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .exceptions import MalformedRecord

T = TypeVar("T", bound=BaseModel)


class ORMMapper:
    @staticmethod
    def one(item, schema: Type[T]) -> T:
        try:
            return schema.model_validate(item, from_attributes=True)
        except ValidationError as e:
            record_id = getattr(item, "id", None)
            raise MalformedRecord(
                f"{schema.__name__} {record_id} failed validation: {e.error_count()} error(s)"
            ) from e

    @staticmethod
    def optional(item, schema: Type[T]) -> T | None:
        if item is None:
            return None
        return ORMMapper.one(item, schema)

    @staticmethod
    def many(items: Iterable, schema: Type[T]) -> list[T]:
        return [ORMMapper.one(item, schema) for item in items]


mapper = ORMMapper()
