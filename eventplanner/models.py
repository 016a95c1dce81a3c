import enum

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


class Role(str, enum.Enum):
    GUEST = "GUEST"
    HOST = "HOST"
    PROVIDER = "PROVIDER"


class BookingStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


ACTIVE_BOOKING_STATUSES = (BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value)


event_category_tags = Table(
    "event_category_tags",
    Base.metadata,
    Column("event_id", Integer, ForeignKey("events.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "category_tag_id",
        Integer,
        ForeignKey("category_tags.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)

# Composite primary key doubles as the "join once" guard
event_attendees = Table(
    "event_attendees",
    Base.metadata,
    Column("event_id", Integer, ForeignKey("events.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("joined_at", DateTime, server_default=func.now()),
)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)  # stored lower-cased
    name = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=Role.GUEST.value)  # GUEST, HOST, PROVIDER
    image = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    provider = relationship("Provider", back_populates="user", uselist=False)
    events = relationship("Event", back_populates="created_by", foreign_keys="Event.created_by_id")
    bookings = relationship("Booking", back_populates="user")


class Provider(Base):
    __tablename__ = "providers"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    business_name = Column(String(200), nullable=False)
    address = Column(String(500), nullable=True)
    phone = Column(String(20), nullable=True)
    email = Column(String(255), nullable=True)  # Public contact address, not the login email
    availability_schedule = Column(JSON, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="provider")
    bookings = relationship("Booking", back_populates="provider", cascade="all, delete-orphan")
    events = relationship("Event", back_populates="provider")


class CategoryTag(Base):
    __tablename__ = "category_tags"

    id = Column(Integer, primary_key=True, index=True)
    label = Column(String(32), unique=True, nullable=False)
    description = Column(String(255), nullable=True)

    events = relationship("Event", secondary=event_category_tags, back_populates="category_tags")


class Event(Base):
    __tablename__ = "events"
    __table_args__ = (CheckConstraint("attendee_count >= 0", name="ck_events_attendee_count"),)

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    description = Column(Text, nullable=True)
    location = Column(String(200), nullable=True)
    image = Column(Text, nullable=True)
    start_at = Column(DateTime, nullable=False, index=True)
    is_private = Column(Boolean, nullable=False, default=True)
    attendee_count = Column(Integer, nullable=False, default=0, server_default="0")
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    created_by_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    provider_id = Column(Integer, ForeignKey("providers.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    created_by = relationship("User", back_populates="events", foreign_keys=[created_by_id])
    provider = relationship("Provider", back_populates="events")
    category_tags = relationship(
        "CategoryTag", secondary=event_category_tags, back_populates="events", order_by="CategoryTag.label"
    )
    attendees = relationship("User", secondary=event_attendees, viewonly=True)
    guests = relationship("Guest", back_populates="event", cascade="all, delete-orphan")
    bookings = relationship("Booking", back_populates="event", cascade="all, delete-orphan")


class Guest(Base):
    __tablename__ = "guests"
    __table_args__ = (UniqueConstraint("event_id", "email", name="uq_guests_event_email"),)

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)  # trimmed + lower-cased
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now())

    event = relationship("Event", back_populates="guests")


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        # At most one PENDING/CONFIRMED booking per (event, provider)
        Index(
            "uq_bookings_active_event_provider",
            "event_id",
            "provider_id",
            unique=True,
            sqlite_where=text("status IN ('PENDING', 'CONFIRMED')"),
            postgresql_where=text("status IN ('PENDING', 'CONFIRMED')"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    provider_id = Column(
        Integer, ForeignKey("providers.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    event = relationship("Event", back_populates="bookings")
    provider = relationship("Provider", back_populates="bookings")
    user = relationship("User", back_populates="bookings")


class PasswordResetToken(Base):
    __tablename__ = "password_reset_tokens"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False)  # One live token per address
    token = Column(String(128), unique=True, index=True, nullable=False)
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
