"""Loads an account's creatives and analyses and computes dashboard metrics."""

from sqlalchemy.orm import Session
from adintel.models import Analysis, Creative
from adintel.services.metrics import calculate_diversity_breakdown, get_dashboard_metrics
from typing import Dict, List, Tuple
import logging

logger = logging.getLogger(__name__)


class DashboardService:
    """Dashboard metrics for one account."""

    def __init__(self, db: Session):
        self.db = db

    def load_account_data(self, user_id: str) -> Tuple[List[Creative], List[Analysis]]:
        """Fetch the account's creatives (newest first) and their analyses."""
        creatives = self.db.query(Creative).filter(
            Creative.user_id == user_id
        ).order_by(Creative.created_at.desc(), Creative.id).all()

        if not creatives:
            return [], []

        analyses = self.db.query(Analysis).filter(
            Analysis.creative_id.in_([c.id for c in creatives])
        ).order_by(Analysis.created_at, Analysis.id).all()

        logger.info(
            f"Loaded {len(creatives)} creatives and {len(analyses)} analyses for user {user_id}"
        )
        return creatives, analyses

    def get_metrics(self, user_id: str) -> Dict:
        creatives, analyses = self.load_account_data(user_id)
        return get_dashboard_metrics(creatives, analyses)

    def get_diversity_breakdown(self, user_id: str) -> Dict:
        creatives, analyses = self.load_account_data(user_id)
        return calculate_diversity_breakdown(creatives, analyses)
