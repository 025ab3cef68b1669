# ============================================================================
# FILE: videotube/db/models/like.py
# ============================================================================
import enum
from sqlalchemy import Column, DateTime, Enum, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import relationship
from videotube.db.base import Base, new_id, utcnow

class LikeSubject(str, enum.Enum):
    VIDEO = "video"
    COMMENT = "comment"
    TWEET = "tweet"

class Like(Base):
    """
    Like join entity. A user likes a given subject at most once; the unique
    constraint is what keeps concurrent toggles from creating duplicates.
    """
    __tablename__ = "likes"
    __table_args__ = (
        UniqueConstraint("subject_type", "subject_id", "liked_by_id", name="uq_like_subject_user"),
    )

    id = Column(String(32), primary_key=True, default=new_id)
    subject_type = Column(Enum(LikeSubject, native_enum=False, length=16), nullable=False)
    subject_id = Column(String(32), nullable=False, index=True)
    liked_by_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow)

    # Relationships
    liked_by = relationship("User")
