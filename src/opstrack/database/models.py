"""SQLAlchemy models for opstrack database."""

from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    Boolean,
    Table,
    TypeDecorator,
    create_engine,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

from opstrack.domain.entities import OperationState

Base = declarative_base()


class OperationStateType(TypeDecorator):
    """Stores OperationState as its versioned text discriminant."""

    impl = String
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, OperationState):
            return value.to_storage()
        return OperationState.from_storage(value).to_storage()

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return OperationState.from_storage(value)


operation_tag = Table(
    "operation_tag",
    Base.metadata,
    Column("operation_id", Integer, ForeignKey("operations.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class BankAccount(Base):
    """Bank account model."""

    __tablename__ = "bank_accounts"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    slug = Column(String, unique=True, nullable=False)
    currency = Column(String, nullable=False, default="EUR")

    # Relationships
    operations = relationship("Operation", back_populates="bank_account")


class Operation(Base):
    """Operation model."""

    __tablename__ = "operations"

    id = Column(Integer, primary_key=True)
    operation_date = Column(String, nullable=False)
    type = Column(String, nullable=False)
    type_display = Column(String, nullable=False)
    details = Column(String, nullable=False)
    amount_in_cents = Column(Integer, nullable=False)
    hash = Column(String, nullable=False, index=True)
    state = Column(OperationStateType, nullable=False, default=OperationState.OK)
    ignored_from_charts = Column(Boolean, default=False, nullable=False)
    bank_account_id = Column(Integer, ForeignKey("bank_accounts.id"), nullable=False)

    # Relationships
    bank_account = relationship("BankAccount", back_populates="operations")
    tags = relationship("Tag", secondary=operation_tag, back_populates="operations")


class Tag(Base):
    """Tag model."""

    __tablename__ = "tags"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    color = Column(String, nullable=True)

    # Relationships
    operations = relationship("Operation", secondary=operation_tag, back_populates="tags")
    rules = relationship("TagRule", back_populates="tag", cascade="all, delete-orphan")


class TagRule(Base):
    """Tag rule model."""

    __tablename__ = "tag_rules"

    id = Column(Integer, primary_key=True)
    tag_id = Column(Integer, ForeignKey("tags.id"), nullable=False)
    kind = Column(String, nullable=False)
    pattern = Column(String, nullable=True)
    min_amount_in_cents = Column(Integer, nullable=True)
    max_amount_in_cents = Column(Integer, nullable=True)

    # Relationships
    tag = relationship("Tag", back_populates="rules")


def create_db_engine(database_url: str) -> Engine:
    """Create a SQLAlchemy engine and make sure all tables exist."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        # The store serializes access itself; allow use from any request thread.
        connect_args["check_same_thread"] = False
    engine = create_engine(database_url, echo=False, connect_args=connect_args)
    Base.metadata.create_all(engine)
    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    return sessionmaker(bind=engine)
