# ============================================================================
# FILE: videotube/db/models/subscription.py
# ============================================================================
from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import relationship
from videotube.db.base import Base, new_id, utcnow

class Subscription(Base):
    """A subscriber following a channel (both are users)"""
    __tablename__ = "subscriptions"
    __table_args__ = (
        UniqueConstraint("subscriber_id", "channel_id", name="uq_subscription_pair"),
    )

    id = Column(String(32), primary_key=True, default=new_id)
    subscriber_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    channel_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow)

    # Relationships
    subscriber = relationship("User", foreign_keys=[subscriber_id])
    channel = relationship("User", foreign_keys=[channel_id])
