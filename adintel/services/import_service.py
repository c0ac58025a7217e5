"""Service for importing and managing creatives."""

from sqlalchemy.orm import Session
from adintel.models import Creative, User, SOURCE_OWN, SOURCE_TYPES
from adintel.services.meta_client import MetaAPIClient
from adintel.services.exceptions import (
    CreativeNotFound,
    MetaAccountNotConnected,
    MetaTokenExpired,
)
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

META_TOKEN_EXPIRY_DAYS = 60


class ImportService:
    """Creates creatives from Meta imports, manual entry and competitor research."""

    def __init__(self, db: Session, meta_client: Optional[MetaAPIClient] = None):
        self.db = db
        self.meta_client = meta_client

    def list_creatives(
        self,
        user_id: str,
        source_type: Optional[str] = None
    ) -> List[Creative]:
        query = self.db.query(Creative).filter(Creative.user_id == user_id)
        if source_type:
            query = query.filter(Creative.source_type == source_type)
        return query.order_by(Creative.created_at.desc()).all()

    def get_creative(self, user_id: str, creative_id: str) -> Creative:
        creative = self.db.query(Creative).filter(
            Creative.id == creative_id,
            Creative.user_id == user_id
        ).first()

        if not creative:
            raise CreativeNotFound(creative_id)
        return creative

    def create_creative(
        self,
        user: User,
        source_type: str = SOURCE_OWN,
        brand_name: Optional[str] = None,
        ad_image_url: Optional[str] = None,
        ad_copy: Optional[str] = None,
        cta: Optional[str] = None,
        performance: Optional[Dict] = None
    ) -> Creative:
        """Create a manually entered or competitor creative."""
        if source_type not in SOURCE_TYPES:
            raise ValueError(f"Unknown source type: {source_type}")

        creative = Creative(
            user_id=user.id,
            source_type=source_type,
            brand_name=brand_name,
            ad_image_url=ad_image_url,
            ad_copy=ad_copy,
            cta=cta,
            performance=dict(performance or {})
        )

        try:
            self.db.add(creative)
            self.db.commit()
            self.db.refresh(creative)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error creating creative: {e}")
            raise

        logger.info(f"Created {source_type} creative {creative.id} for user {user.id}")
        return creative

    def delete_creative(self, user: User, creative_id: str) -> None:
        """Delete a creative; its analysis goes with it."""
        creative = self.get_creative(user.id, creative_id)

        try:
            self.db.delete(creative)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error deleting creative {creative_id}: {e}")
            raise

        logger.info(f"Deleted creative {creative_id} for user {user.id}")

    def connect_meta(
        self,
        user: User,
        access_token: str,
        ad_account_id: str,
        expires_at: Optional[datetime] = None
    ) -> User:
        """Store a Meta access token and ad account on the user."""
        if expires_at is None:
            expires_at = datetime.utcnow() + timedelta(days=META_TOKEN_EXPIRY_DAYS)
        elif expires_at.tzinfo is not None:
            expires_at = expires_at.astimezone(timezone.utc).replace(tzinfo=None)

        try:
            user.meta_access_token = access_token
            user.meta_ad_account_id = ad_account_id
            user.meta_token_expires_at = expires_at

            self.db.commit()
            self.db.refresh(user)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error connecting Meta ad account for user {user.id}: {e}")
            raise

        logger.info(f"Connected Meta ad account {ad_account_id} for user {user.id}")
        return user

    def _get_meta_client(self, user: User) -> MetaAPIClient:
        if not user.meta_access_token or not user.meta_ad_account_id:
            raise MetaAccountNotConnected()

        if user.meta_token_expires_at and user.meta_token_expires_at < datetime.utcnow():
            raise MetaTokenExpired()

        if self.meta_client is None:
            self.meta_client = MetaAPIClient(user.meta_access_token, user.meta_ad_account_id)
        return self.meta_client

    def import_meta_ads(self, user: User) -> Dict:
        """
        Import the user's Meta ads as own creatives.

        Ads imported earlier are matched by ad id and get their performance
        metrics refreshed instead of being inserted again.

        Returns:
            Dictionary with imported/updated counts and the touched creatives
        """
        client = self._get_meta_client(user)
        ads = client.get_ads()
        logger.info(f"Fetched {len(ads)} ads from Meta for user {user.id}")

        imported = []
        updated = []

        try:
            for ad in ads:
                if not ad.get('ad_id'):
                    logger.warning(f"Skipping Meta ad without id: {ad.get('name')}")
                    continue

                existing = self.db.query(Creative).filter(
                    Creative.user_id == user.id,
                    Creative.ad_id == ad['ad_id']
                ).first()

                if existing:
                    existing.performance = dict(ad['performance'])
                    updated.append(existing)
                    continue

                creative = Creative(
                    user_id=user.id,
                    source_type=SOURCE_OWN,
                    brand_name=ad.get('name') or 'Imported Ad',
                    ad_id=ad['ad_id'],
                    ad_image_url=ad.get('image_url'),
                    ad_copy=ad.get('ad_copy'),
                    cta=ad.get('cta'),
                    performance=dict(ad['performance'])
                )
                self.db.add(creative)
                imported.append(creative)

            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error importing Meta ads for user {user.id}: {e}")
            raise

        for creative in imported + updated:
            self.db.refresh(creative)

        logger.info(
            f"Imported {len(imported)} and updated {len(updated)} creatives for user {user.id}"
        )
        return {
            'imported': len(imported),
            'updated': len(updated),
            'total': len(ads),
            'creatives': imported + updated,
        }
