"""SQLAlchemy models for the woodshop store."""

from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session
from sqlalchemy.pool import StaticPool

Base = declarative_base()

# Money is kept in cents, stock quantities allow fractional units (e.g. 0.5 board).
Money = Numeric(12, 2)
Quantity = Numeric(12, 3)


class Sequence(Base):
    """Named counter that only moves forward (e.g. project numbers)."""

    __tablename__ = "sequences"

    name = Column(String, primary_key=True)
    value = Column(Integer, nullable=False, default=0)


class Client(Base):
    """Client model."""

    __tablename__ = "clients"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(32), unique=True, nullable=False)
    name = Column(String, nullable=False)
    person_type = Column(String, nullable=False)
    tax_id = Column(String, nullable=True)
    email = Column(String, nullable=False, default="")
    phone = Column(String, nullable=False, default="")
    mobile = Column(String, nullable=False, default="")
    country = Column(String, nullable=False, default="")
    state = Column(String, nullable=False, default="")
    city = Column(String, nullable=False, default="")
    zip_code = Column(String, nullable=False, default="")
    neighborhood = Column(String, nullable=False, default="")
    street_type = Column(String, nullable=False, default="")
    street = Column(String, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False)
    total_projects = Column(Integer, nullable=False, default=0)
    total_value = Column(Money, nullable=False, default=0)


class Material(Base):
    """Material model."""

    __tablename__ = "materials"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(32), unique=True, nullable=False)
    name = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    category = Column(String, nullable=False, default="")
    unit = Column(String, nullable=False)
    current_stock = Column(Quantity, nullable=False, default=0)
    min_stock = Column(Quantity, nullable=False, default=0)
    current_price = Column(Money, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)

    # Relationships
    price_history = relationship(
        "PriceHistoryEntry",
        back_populates="material",
        cascade="all, delete-orphan",
        order_by="PriceHistoryEntry.seq",
    )


class PriceHistoryEntry(Base):
    """Price history entry model. Insertion order is chronological order."""

    __tablename__ = "price_history_entries"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    material_id = Column(String(32), ForeignKey("materials.id"), nullable=False)
    date = Column(Date, nullable=False)
    price = Column(Money, nullable=False)
    supplier = Column(String, nullable=True)

    # Relationships
    material = relationship("Material", back_populates="price_history")


class Product(Base):
    """Product model."""

    __tablename__ = "products"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(32), unique=True, nullable=False)
    name = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    category = Column(String, nullable=False, default="")
    unit = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)

    # Relationships
    components = relationship(
        "ProductComponent",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductComponent.seq",
    )


class ProductComponent(Base):
    """Bill-of-materials row. ``material_id`` is a plain reference, not a foreign key,
    so deleting a material leaves the snapshot in place."""

    __tablename__ = "product_components"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    product_id = Column(String(32), ForeignKey("products.id"), nullable=False)
    material_id = Column(String(32), nullable=False)
    material_name = Column(String, nullable=False)
    quantity = Column(Quantity, nullable=False)
    unit = Column(String, nullable=False)

    __table_args__ = (UniqueConstraint("product_id", "material_id", name="uq_product_material"),)

    # Relationships
    product = relationship("Product", back_populates="components")


class Project(Base):
    """Project model with embedded payment terms."""

    __tablename__ = "projects"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(32), unique=True, nullable=False)
    number = Column(Integer, unique=True, nullable=False)
    client_id = Column(String(32), nullable=False)
    client_name = Column(String, nullable=False, default="")
    title = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    status = Column(String, nullable=False)
    type = Column(String, nullable=False)
    budget = Column(Money, nullable=False)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    materials_cost = Column(Money, nullable=True)
    labor_cost = Column(Money, nullable=True)
    profit_margin = Column(Numeric(5, 2), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    # Payment terms (all null when the project has none)
    installments = Column(Integer, nullable=True)
    payment_method = Column(String, nullable=True)
    discount_percentage = Column(Numeric(5, 2), nullable=True)
    installment_value = Column(Money, nullable=True)
    total_with_discount = Column(Money, nullable=True)

    # Relationships
    line_items = relationship(
        "LineItem",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="LineItem.seq",
    )


class LineItem(Base):
    """Project line item model."""

    __tablename__ = "line_items"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(32), unique=True, nullable=False)
    project_id = Column(String(32), ForeignKey("projects.id"), nullable=False)
    product_id = Column(String(32), nullable=False)
    product_name = Column(String, nullable=False)
    quantity = Column(Quantity, nullable=False)
    unit_price = Column(Money, nullable=False)
    total_price = Column(Money, nullable=False)

    # Relationships
    project = relationship("Project", back_populates="line_items")


class Transaction(Base):
    """Financial transaction model."""

    __tablename__ = "transactions"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(32), unique=True, nullable=False)
    project_id = Column(String(32), nullable=True)
    project_title = Column(String, nullable=True)
    type = Column(String, nullable=False)
    category = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    amount = Column(Money, nullable=False)
    date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)


class StockMovement(Base):
    """Stock movement model."""

    __tablename__ = "stock_movements"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(32), unique=True, nullable=False)
    material_id = Column(String(32), nullable=False)
    material_name = Column(String, nullable=False)
    type = Column(String, nullable=False)
    quantity = Column(Quantity, nullable=False)
    unit_price = Column(Money, nullable=True)
    total_value = Column(Money, nullable=True)
    project_id = Column(String(32), nullable=True)
    project_title = Column(String, nullable=True)
    date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)


def create_session_factory(database_url: str = "sqlite://") -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory.

    The default URL is a private in-memory SQLite database. ``StaticPool``
    keeps that single connection alive for the lifetime of the engine so the
    data does not vanish between sessions.
    """
    engine = create_engine(
        database_url,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
