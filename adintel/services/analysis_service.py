"""Service for running and storing creative analyses."""

from sqlalchemy.orm import Session
from adintel.models import Analysis, Creative, User, PAYMENT_FREE, PAYMENT_PAID
from adintel.services.ai_analyst import AIAnalyst
from adintel.services.creative_analyzer import CreativeAnalyzer
from adintel.services.exceptions import AnalysisLimitReached, CreativeNotFound
from adintel.config import settings
from typing import Dict, Optional, Tuple
import logging

logger = logging.getLogger(__name__)


class AnalysisService:
    """Runs the analyzer matching the account tier and keeps one analysis per creative."""

    def __init__(
        self,
        db: Session,
        analyzer: Optional[CreativeAnalyzer] = None,
        ai_analyst: Optional[AIAnalyst] = None
    ):
        self.db = db
        self.analyzer = analyzer or CreativeAnalyzer()
        self.ai_analyst = ai_analyst or AIAnalyst()
        self.free_tier_limit = settings.free_tier_analysis_limit

    def remaining_analyses(self, user: User) -> Optional[int]:
        """Analyses left on the free tier, or None for paid accounts."""
        if user.payment_status == PAYMENT_PAID:
            return None
        return max(self.free_tier_limit - (user.analysis_count or 0), 0)

    def get_analysis(self, user: User, creative_id: str) -> Optional[Analysis]:
        return self.db.query(Analysis).join(Creative).filter(
            Analysis.creative_id == creative_id,
            Creative.user_id == user.id
        ).first()

    def run_analyzer(self, user: User, creative: Creative) -> Dict:
        if user.payment_status == PAYMENT_PAID:
            return self.ai_analyst.analyze_creative(
                creative.ad_image_url, creative.ad_copy, creative.cta
            )
        return self.analyzer.analyze(
            creative.ad_image_url, creative.ad_copy, creative.cta
        )

    def analyze_creative(
        self,
        user: User,
        creative_id: str
    ) -> Tuple[Analysis, Optional[int]]:
        """
        Analyze a creative and store the result.

        A creative that was analyzed before has its analysis replaced, so
        each creative carries at most one analysis.

        Args:
            user: Account requesting the analysis
            creative_id: Creative owned by that account

        Returns:
            Tuple of the stored analysis and the remaining free analyses
        """
        creative = self.db.query(Creative).filter(
            Creative.id == creative_id,
            Creative.user_id == user.id
        ).first()

        if not creative:
            raise CreativeNotFound(creative_id)

        if (user.payment_status or PAYMENT_FREE) == PAYMENT_FREE and \
                (user.analysis_count or 0) >= self.free_tier_limit:
            raise AnalysisLimitReached(self.free_tier_limit)

        result = self.run_analyzer(user, creative)

        try:
            analysis = creative.analysis
            if analysis:
                analysis.analysis_result = result
                logger.info(f"Replaced analysis for creative {creative.id}")
            else:
                analysis = Analysis(analysis_result=result)
                creative.analysis = analysis
                logger.info(f"Created analysis for creative {creative.id}")

            user.analysis_count = (user.analysis_count or 0) + 1

            self.db.commit()
            self.db.refresh(analysis)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error saving analysis for creative {creative.id}: {e}")
            raise

        return analysis, self.remaining_analyses(user)
