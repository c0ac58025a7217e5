from adintel.services.meta_client import MetaAPIClient
from adintel.services.import_service import ImportService
from adintel.services.analysis_service import AnalysisService
from adintel.services.dashboard import DashboardService
from adintel.services.creative_analyzer import CreativeAnalyzer
from adintel.services.ai_analyst import AIAnalyst

__all__ = [
    'MetaAPIClient',
    'ImportService',
    'AnalysisService',
    'DashboardService',
    'CreativeAnalyzer',
    'AIAnalyst'
]
