from sqlalchemy import Column, DDL, DateTime, Index, Integer, String, Text, event
from datetime import datetime, timezone
from src.database.db import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Contact(Base):
    __tablename__ = "contacts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    email = Column(String(100), nullable=True)
    phone = Column(String(20), nullable=True)
    company = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("idx_contacts_last_name", "last_name"),
        Index("idx_contacts_email", "email"),
    )


# PostgreSQL keeps updated_at fresh for writes that bypass the ORM as well.
update_updated_at_function = DDL(
    """
    CREATE OR REPLACE FUNCTION update_updated_at_column()
    RETURNS TRIGGER AS $$
    BEGIN
        NEW.updated_at = CURRENT_TIMESTAMP;
        RETURN NEW;
    END;
    $$ LANGUAGE plpgsql
    """
)

update_contacts_updated_at_trigger = DDL(
    """
    CREATE TRIGGER update_contacts_updated_at
        BEFORE UPDATE ON contacts
        FOR EACH ROW
        EXECUTE FUNCTION update_updated_at_column()
    """
)

event.listen(Contact.__table__, "after_create", update_updated_at_function.execute_if(dialect="postgresql"))
event.listen(Contact.__table__, "after_create", update_contacts_updated_at_trigger.execute_if(dialect="postgresql"))
