from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import List, Optional
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
import uuid


# Bounds of what the relational store holds exactly: INTEGER quantities and
# NUMERIC(18, 2) amounts
MAX_QUANTITY = 2**31 - 1
MAX_ORDER_TOTAL = Decimal(10) ** 16


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OrderStatus(str, Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    PROCESSED = "Processed"
    FAILED = "Failed"

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.PROCESSED, OrderStatus.FAILED)


class InvalidOrderTransition(Exception):
    """Raised when an order is asked to make a transition its state does not allow."""

    def __init__(self, order_id: uuid.UUID, status: OrderStatus, action: str):
        self.order_id = order_id
        self.status = status
        self.action = action
        super().__init__(f"Cannot {action} order {order_id} in status {status.value}")


# --- Domain ---

class OrderItem(BaseModel):
    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    product_name: str = Field(min_length=1, max_length=200)
    quantity: int = Field(gt=0)
    unit_price: Decimal = Field(gt=0)

    model_config = ConfigDict(frozen=True)

    @property
    def total_price(self) -> Decimal:
        return self.quantity * self.unit_price


class Order(BaseModel):
    """Order aggregate.

    Instances are immutable; every transition returns a new Order, so the only
    way to change an order is through `mark_processing`, `apply_tax`,
    `mark_processed` and `mark_failed`.
    """

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    external_id: str = Field(min_length=1, max_length=50)
    items: List[OrderItem] = Field(min_length=1)
    total_amount: Decimal
    tax_amount: Optional[Decimal] = None
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime = Field(default_factory=_utcnow)
    processed_at: Optional[datetime] = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def check_total_matches_items(self) -> "Order":
        expected = sum((item.total_price for item in self.items), Decimal("0"))
        if self.total_amount != expected:
            raise ValueError(
                f"total_amount {self.total_amount} does not match the items total {expected}"
            )
        return self

    @classmethod
    def create(cls, external_id: str, items: List[OrderItem]) -> "Order":
        total = sum((item.total_price for item in items), Decimal("0"))
        return cls(external_id=external_id, items=list(items), total_amount=total)

    def mark_processing(self) -> "Order":
        if self.status != OrderStatus.PENDING:
            raise InvalidOrderTransition(self.id, self.status, "start processing")
        return self.model_copy(update={"status": OrderStatus.PROCESSING})

    def apply_tax(self, tax_amount: Decimal) -> "Order":
        if self.status.is_terminal:
            raise InvalidOrderTransition(self.id, self.status, "apply tax to")
        if self.tax_amount is not None:
            raise InvalidOrderTransition(self.id, self.status, "re-apply tax to")
        if tax_amount < 0:
            raise ValueError(f"Tax amount must be non-negative, got {tax_amount}")
        return self.model_copy(update={"tax_amount": tax_amount})

    def mark_processed(self) -> "Order":
        if self.status != OrderStatus.PROCESSING:
            raise InvalidOrderTransition(self.id, self.status, "complete")
        if self.tax_amount is None:
            raise InvalidOrderTransition(self.id, self.status, "complete untaxed")
        processed_at = max(_utcnow(), self.created_at)
        return self.model_copy(
            update={"status": OrderStatus.PROCESSED, "processed_at": processed_at}
        )

    def mark_failed(self) -> "Order":
        if self.status.is_terminal:
            raise InvalidOrderTransition(self.id, self.status, "fail")
        return self.model_copy(update={"status": OrderStatus.FAILED})


# --- API payloads ---

class OrderItemRequest(BaseModel):
    product_name: str = Field(min_length=1, max_length=200)
    quantity: int = Field(gt=0, le=MAX_QUANTITY)
    unit_price: Decimal = Field(gt=0, max_digits=18, decimal_places=2)

    @field_validator("product_name")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("product_name is required")
        return value


class CreateOrderRequest(BaseModel):
    external_id: str = Field(min_length=1, max_length=50)
    items: List[OrderItemRequest] = Field(min_length=1)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "external_id": "PED-1001",
                "items": [
                    {"product_name": "Keyboard", "quantity": 2, "unit_price": "50.00"},
                    {"product_name": "Mouse", "quantity": 1, "unit_price": "25.00"},
                ],
            }
        }
    )

    @field_validator("external_id")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("external_id is required")
        return value

    @field_validator("items")
    @classmethod
    def total_within_bounds(cls, items: List[OrderItemRequest]) -> List[OrderItemRequest]:
        total = sum((item.quantity * item.unit_price for item in items), Decimal("0"))
        if total >= MAX_ORDER_TOTAL:
            raise ValueError(f"order total must be less than {MAX_ORDER_TOTAL:f}")
        return items


class OrderItemResponse(BaseModel):
    id: uuid.UUID
    product_name: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal

    @classmethod
    def from_item(cls, item: OrderItem) -> "OrderItemResponse":
        return cls(
            id=item.id,
            product_name=item.product_name,
            quantity=item.quantity,
            unit_price=item.unit_price,
            total_price=item.total_price,
        )


class OrderResponse(BaseModel):
    id: uuid.UUID
    external_id: str
    items: List[OrderItemResponse]
    total_amount: Decimal
    tax_amount: Optional[Decimal] = None
    status: OrderStatus
    created_at: datetime
    processed_at: Optional[datetime] = None

    @classmethod
    def from_order(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.id,
            external_id=order.external_id,
            items=[OrderItemResponse.from_item(item) for item in order.items],
            total_amount=order.total_amount,
            tax_amount=order.tax_amount,
            status=order.status,
            created_at=order.created_at,
            processed_at=order.processed_at,
        )


class ErrorResponse(BaseModel):
    code: str
    message: str


class FieldError(BaseModel):
    field: str
    message: str


class ValidationErrorResponse(ErrorResponse):
    errors: List[FieldError] = []
