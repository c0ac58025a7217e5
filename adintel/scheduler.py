"""Background job scheduler for the daily Meta ads import."""

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from adintel.database import SessionLocal
from adintel.models import User
from adintel.services import ImportService
import logging

logger = logging.getLogger(__name__)


class DailyImportScheduler:
    """Re-imports ads and performance metrics for every connected Meta account."""
    
    def __init__(self, hour: int = 1, session_factory=SessionLocal):
        self.session_factory = session_factory
        self.scheduler = BackgroundScheduler()
        self.scheduler.add_job(
            self.run_daily_job,
            trigger=CronTrigger(hour=hour, minute=0),
            id='daily_meta_import_job',
            name='Daily Meta ads import',
            replace_existing=True
        )
    
    @property
    def running(self) -> bool:
        return self.scheduler.running
    
    def run_daily_job(self) -> int:
        """Import Meta ads for each connected account; returns accounts imported."""
        logger.info("Starting daily Meta import job")
        db = self.session_factory()
        succeeded = 0
        
        try:
            users = db.query(User).filter(
                User.meta_access_token.isnot(None),
                User.meta_ad_account_id.isnot(None)
            ).all()
            logger.info(f"Importing ads for {len(users)} connected accounts")
            
            for user in users:
                try:
                    result = ImportService(db).import_meta_ads(user)
                    succeeded += 1
                    logger.info(
                        f"User {user.id}: {result['imported']} imported, {result['updated']} updated"
                    )
                except Exception as e:
                    logger.error(f"Error importing ads for user {user.id}: {e}")
                    db.rollback()
            
            logger.info("Daily import job completed")
        except Exception as e:
            logger.error(f"Error in daily import job: {e}")
            db.rollback()
        finally:
            db.close()
        
        return succeeded
    
    def start(self):
        """Start the scheduler."""
        self.scheduler.start()
        logger.info("Scheduler started")
    
    def shutdown(self):
        """Stop the scheduler."""
        self.scheduler.shutdown()
        logger.info("Scheduler stopped")
