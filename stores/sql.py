import asyncio
import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String, Uuid, create_engine, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship, selectinload, sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy.types import TypeDecorator

from models.order import Order, OrderItem, OrderStatus
from stores.base import OrderConflictError, OrderStore

logger = logging.getLogger(__name__)


class ExactDecimal(TypeDecorator):
    """NUMERIC column that never loses digits.

    SQLite has no decimal storage and hands NUMERIC values back through float,
    so there the value is kept as its string form instead.
    """

    impl = Numeric
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "sqlite":
            return dialect.type_descriptor(String(self.impl.precision + 2))
        return dialect.type_descriptor(Numeric(self.impl.precision, self.impl.scale))

    def process_bind_param(self, value, dialect):
        if value is not None and dialect.name == "sqlite":
            return str(value)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and dialect.name == "sqlite":
            return Decimal(value)
        return value


class Base(DeclarativeBase):
    pass


class OrderRecord(Base):
    __tablename__ = "orders"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    external_id: Mapped[str] = mapped_column(String(50), nullable=False, unique=True, index=True)
    total_amount: Mapped[Decimal] = mapped_column(ExactDecimal(18, 2), nullable=False)
    # Wide enough for any rate up to 1 applied to the largest total
    tax_amount: Mapped[Optional[Decimal]] = mapped_column(ExactDecimal(20, 4), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    processed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    items: Mapped[List["OrderItemRecord"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemRecord.position",
    )


class OrderItemRecord(Base):
    __tablename__ = "order_items"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    order_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("orders.id", ondelete="CASCADE"), index=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    product_name: Mapped[str] = mapped_column(String(200), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(ExactDecimal(18, 2), nullable=False)

    order: Mapped[OrderRecord] = relationship(back_populates="items")


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_record(order: Order) -> OrderRecord:
    return OrderRecord(
        id=order.id,
        external_id=order.external_id,
        total_amount=order.total_amount,
        tax_amount=order.tax_amount,
        status=order.status.value,
        created_at=order.created_at,
        processed_at=order.processed_at,
        items=[
            OrderItemRecord(
                id=item.id,
                position=position,
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=item.unit_price,
            )
            for position, item in enumerate(order.items)
        ],
    )


def _to_domain(record: OrderRecord) -> Order:
    # Stored rows are not re-validated, so one odd row cannot break a listing
    return Order.model_construct(
        id=record.id,
        external_id=record.external_id,
        items=[
            OrderItem.model_construct(
                id=item.id,
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=item.unit_price,
            )
            for item in record.items
        ],
        total_amount=record.total_amount,
        tax_amount=record.tax_amount,
        status=OrderStatus(record.status),
        created_at=_as_utc(record.created_at),
        processed_at=_as_utc(record.processed_at),
    )


def _engine_options(database_url: str) -> dict:
    if not database_url.startswith("sqlite"):
        return {"pool_pre_ping": True}
    options = {"connect_args": {"check_same_thread": False}}
    if ":memory:" in database_url or database_url in ("sqlite://", "sqlite+pysqlite://"):
        # One shared connection, otherwise every thread sees its own empty database
        options["poolclass"] = StaticPool
    return options


class SqlOrderStore(OrderStore):
    """Relational store on SQLAlchemy.

    Uniqueness of the external id is enforced by a unique index; a violating
    insert surfaces as OrderConflictError. Blocking session work runs in a
    worker thread so the event loop stays free.
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self._engine = create_engine(database_url, echo=echo, **_engine_options(database_url))
        self._session_factory = sessionmaker(self._engine, expire_on_commit=False)
        logger.info(f"SQL order store bound to {self._engine.url}")

    def create_tables(self) -> None:
        Base.metadata.create_all(self._engine)

    async def exists(self, external_id: str) -> bool:
        return await asyncio.to_thread(self._exists, external_id)

    async def insert(self, order: Order) -> None:
        await asyncio.to_thread(self._insert, order)

    async def get(self, order_id: uuid.UUID) -> Optional[Order]:
        return await asyncio.to_thread(self._get_one, OrderRecord.id == order_id)

    async def get_by_external_id(self, external_id: str) -> Optional[Order]:
        return await asyncio.to_thread(self._get_one, OrderRecord.external_id == external_id)

    async def list_all(self) -> List[Order]:
        return await asyncio.to_thread(self._list)

    async def list_processed(self) -> List[Order]:
        return await asyncio.to_thread(self._list, OrderRecord.status == OrderStatus.PROCESSED.value)

    async def close(self) -> None:
        await asyncio.to_thread(self._engine.dispose)

    def _exists(self, external_id: str) -> bool:
        with self._session_factory() as session:
            stmt = select(OrderRecord.id).where(OrderRecord.external_id == external_id).limit(1)
            return session.execute(stmt).first() is not None

    def _insert(self, order: Order) -> None:
        with self._session_factory() as session:
            session.add(_to_record(order))
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                # Only the unique external id is a conflict; other constraint failures propagate
                if not self._exists(order.external_id):
                    raise
                logger.warning(f"Insert of order {order.id} rejected, external_id {order.external_id} is taken: {e.orig}")
                raise OrderConflictError(order.external_id) from e

    def _get_one(self, condition) -> Optional[Order]:
        with self._session_factory() as session:
            stmt = select(OrderRecord).options(selectinload(OrderRecord.items)).where(condition)
            record = session.execute(stmt).scalar_one_or_none()
            return _to_domain(record) if record is not None else None

    def _list(self, condition=None) -> List[Order]:
        with self._session_factory() as session:
            stmt = select(OrderRecord).options(selectinload(OrderRecord.items)).order_by(OrderRecord.created_at)
            if condition is not None:
                stmt = stmt.where(condition)
            return [_to_domain(record) for record in session.execute(stmt).scalars()]
