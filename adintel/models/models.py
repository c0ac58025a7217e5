from sqlalchemy import Column, Integer, String, DateTime, JSON, Text, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from adintel.database import Base
import uuid

SOURCE_OWN = "own"
SOURCE_COMPETITOR = "competitor"
SOURCE_TYPES = (SOURCE_OWN, SOURCE_COMPETITOR)

PAYMENT_FREE = "free"
PAYMENT_PAID = "paid"


def generate_uuid() -> str:
    return str(uuid.uuid4())


class User(Base):
    """Account profile keyed by the identity provider's user id."""
    __tablename__ = "users"

    id = Column(String, primary_key=True, index=True)
    email = Column(String, nullable=True, unique=True)

    # Billing
    payment_status = Column(String, nullable=False, default=PAYMENT_FREE)
    analysis_count = Column(Integer, nullable=False, default=0)

    # Meta ad account connection
    meta_access_token = Column(Text, nullable=True)
    meta_token_expires_at = Column(DateTime, nullable=True)
    meta_ad_account_id = Column(String, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    creatives = relationship(
        "Creative",
        back_populates="user",
        cascade="all, delete-orphan",
    )


class Creative(Base):
    """One imported or manually entered ad unit."""
    __tablename__ = "creatives"

    id = Column(String, primary_key=True, default=generate_uuid)
    user_id = Column(
        String,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    source_type = Column(String, nullable=False, index=True)  # own, competitor

    # Content
    brand_name = Column(String, nullable=True)
    ad_id = Column(String, nullable=True)
    ad_image_url = Column(Text, nullable=True)
    ad_copy = Column(Text, nullable=True)
    cta = Column(String, nullable=True)

    # Sparse metrics: impressions, clicks, ctr, cpc, spend, conversions, reach
    performance = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="creatives")
    analysis = relationship(
        "Analysis",
        back_populates="creative",
        uselist=False,
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index('idx_creatives_user_ad', 'user_id', 'ad_id'),
    )


class Analysis(Base):
    """AI-derived tag set attached to exactly one creative."""
    __tablename__ = "analysis"

    id = Column(String, primary_key=True, default=generate_uuid)
    creative_id = Column(
        String,
        ForeignKey("creatives.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )

    # headline, headline_length, emotion, copy_tone, primary_color, cta,
    # visual_elements, performance_driver, recommendations
    analysis_result = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime, server_default=func.now())

    creative = relationship("Creative", back_populates="analysis")
