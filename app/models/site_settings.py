"""
Site Settings Model

Key-value store for the shop settings document (contacts, social links,
delivery and payment toggles). One row per top-level settings key.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime

from app.core.database import Base
from app.core.utils import utcnow


class SiteSetting(Base):
    __tablename__ = "site_settings"

    id = Column(Integer, primary_key=True, index=True)
    key = Column(String(100), unique=True, nullable=False, index=True)
    value = Column(Text)  # JSON-encoded
    value_type = Column(String(20), default="json")  # json, string, number, boolean
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<SiteSetting {self.key}={self.value}>"
