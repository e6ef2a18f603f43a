from pydantic import BaseModel, ConfigDict
from typing import ClassVar, Generic, Optional, TypeVar, Union
from uuid import UUID

T = TypeVar("T")


class Error(BaseModel):
    """Typed business failure with a dotted `<Entity>.<Kind>` code."""

    code: str
    message: str

    NONE: ClassVar["Error"]

    model_config = ConfigDict(frozen=True)

    @classmethod
    def not_found(cls, entity: str, identifier: str) -> "Error":
        return cls(
            code=f"{entity}.NotFound",
            message=f"{entity} with identifier '{identifier}' was not found.",
        )

    @classmethod
    def duplicate(cls, entity: str, identifier: str) -> "Error":
        return cls(
            code=f"{entity}.Duplicate",
            message=f"{entity} with identifier '{identifier}' already exists.",
        )

    @classmethod
    def validation(cls, message: str) -> "Error":
        return cls(code="Validation.Error", message=message)


Error.NONE = Error(code="", message="")


class OrderErrors:
    @staticmethod
    def not_found(order_id: Union[UUID, str]) -> Error:
        return Error.not_found("Order", str(order_id))

    @staticmethod
    def not_found_by_external_id(external_id: str) -> Error:
        return Error.not_found("Order", external_id)

    @staticmethod
    def duplicate(external_id: str) -> Error:
        return Error.duplicate("Order", external_id)


class Result(Generic[T]):
    """Outcome of a workflow operation: either a value or an Error, never both."""

    def __init__(self, value: Optional[T], error: Error):
        self._value = value
        self.error = error

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value, Error.NONE)

    @classmethod
    def failure(cls, error: Error) -> "Result[T]":
        if error is None or error == Error.NONE:
            raise ValueError("A failed result requires an error")
        return cls(None, error)

    @property
    def is_success(self) -> bool:
        return self.error == Error.NONE

    @property
    def is_failure(self) -> bool:
        return not self.is_success

    @property
    def value(self) -> T:
        if self.is_failure:
            raise ValueError(f"Cannot access the value of a failed result ({self.error.code})")
        return self._value

    def __repr__(self) -> str:
        if self.is_success:
            return f"Result.success({self._value!r})"
        return f"Result.failure({self.error!r})"
