"""Meta Marketing API client for importing ads as creatives."""

from facebook_business.api import FacebookAdsApi
from facebook_business.adobjects.adaccount import AdAccount
from typing import Dict, List
from adintel.config import settings
import logging

logger = logging.getLogger(__name__)

AD_FIELDS = [
    'id',
    'name',
    'creative{image_url,body,title,link_description,call_to_action_type}',
    'insights{impressions,clicks,ctr,cpc,spend,reach}',
]


class MetaAPIClient:
    """Client for reading ads from a connected Meta ad account (read-only)."""

    def __init__(self, access_token: str, ad_account_id: str):
        self.api = FacebookAdsApi.init(
            settings.meta_app_id,
            settings.meta_app_secret,
            access_token,
            api_version=settings.meta_api_version
        )
        if not ad_account_id.startswith('act_'):
            ad_account_id = f'act_{ad_account_id}'
        self.ad_account_id = ad_account_id
        self.account = AdAccount(self.ad_account_id, api=self.api)

    def get_ads(self, limit: int = 50) -> List[Dict]:
        """
        Fetch ads with their creative content and lifetime insights.

        Args:
            limit: Page size for the ads edge

        Returns:
            List of normalized ad dictionaries
        """
        try:
            ads = self.account.get_ads(fields=AD_FIELDS, params={'limit': limit})
            return [parse_ad(ad.export_all_data()) for ad in ads]
        except Exception as e:
            logger.error(f"Error fetching ads for {self.ad_account_id}: {e}")
            raise


def parse_ad(data: Dict) -> Dict:
    """Flatten a raw ad payload into creative fields and performance metrics."""
    creative = data.get('creative') or {}
    insights = (data.get('insights') or {}).get('data') or []

    return {
        'ad_id': data.get('id'),
        'name': data.get('name'),
        'image_url': creative.get('image_url'),
        'ad_copy': creative.get('body') or creative.get('title'),
        'cta': creative.get('call_to_action_type'),
        'performance': parse_insight(insights[0]) if insights else {},
    }


def parse_insight(insight: Dict) -> Dict:
    """Convert Meta's string-typed insight values; unmeasured keys are left out."""
    metrics = {
        'impressions': int(insight.get('impressions', 0)),
        'clicks': int(insight.get('clicks', 0)),
        'reach': int(insight['reach']) if insight.get('reach') else None,
        'ctr': float(insight['ctr']) if insight.get('ctr') else None,
        'cpc': float(insight['cpc']) if insight.get('cpc') else None,
        'spend': float(insight.get('spend', 0)),
    }
    return {key: value for key, value in metrics.items() if value is not None}
