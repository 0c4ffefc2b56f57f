from sqlalchemy import Column, Date, DateTime, Index, Integer, MetaData, String, Table

metadata = MetaData()

listings = Table(
    "listings",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("owner_id", String(36)),
    Column("advance_notice_hours", Integer, nullable=False, default=0),
)

bookings = Table(
    "bookings",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("listing_id", String(36), nullable=False, index=True),
    Column("renter_id", String(36), nullable=False),
    Column("start_date", Date, nullable=False),
    Column("end_date", Date, nullable=False),
    Column("status", String(16), nullable=False),
    Column("lock_version", Integer, nullable=False, default=0),
    Column("created_at", DateTime),
    Column("updated_at", DateTime),
)

availability_rules = Table(
    "availability_rules",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("listing_id", String(36), nullable=False),
    Column("start_date", Date, nullable=False),
    Column("end_date", Date, nullable=False),
    Column("kind", String(16), nullable=False),
    # One BOOKED rule per booking
    Column("booking_id", String(36), unique=True),
    Column("reason", String(255)),
    Column("created_at", DateTime),
    Index("ix_availability_rules_listing_range", "listing_id", "start_date", "end_date"),
)
