from datetime import datetime, timedelta, timezone

import pytest

from adintel.models import Analysis, Creative, User
from adintel.scheduler import DailyImportScheduler
from adintel.services import AnalysisService, ImportService
from adintel.services import import_service
from adintel.services.exceptions import (
    AnalysisLimitReached,
    CreativeNotFound,
    MetaAccountNotConnected,
    MetaTokenExpired,
)
from adintel.services.meta_client import parse_ad


class FakeAnalyzer:
    def __init__(self, result):
        self.result = result
        self.calls = []

    def analyze(self, image_url=None, ad_copy=None, cta=None):
        self.calls.append((image_url, ad_copy, cta))
        return dict(self.result)


class FakeAIAnalyst:
    def __init__(self, result):
        self.result = result
        self.calls = []

    def analyze_creative(self, image_url=None, ad_copy=None, cta=None):
        self.calls.append((image_url, ad_copy, cta))
        return dict(self.result)


class FakeMetaClient:
    def __init__(self, ads):
        self.ads = ads

    def get_ads(self, limit=50):
        return [dict(ad) for ad in self.ads]


META_ADS = [
    {
        "ad_id": "111",
        "name": "Spring Sale",
        "image_url": "https://cdn.example.com/111.png",
        "ad_copy": "Save big this spring",
        "cta": "SHOP_NOW",
        "performance": {"impressions": 1000, "clicks": 30, "ctr": 3.0, "spend": 12.5},
    },
    {
        "ad_id": "222",
        "name": None,
        "image_url": None,
        "ad_copy": None,
        "cta": None,
        "performance": {},
    },
]


def add_creative(db_session, user, **kwargs):
    creative = Creative(user_id=user.id, source_type=kwargs.pop("source_type", "own"), **kwargs)
    db_session.add(creative)
    db_session.commit()
    db_session.refresh(creative)
    return creative


# Analysis

def test_free_account_uses_heuristic_analyzer(db_session, user):
    creative = add_creative(db_session, user, ad_copy="Hello", cta="Go")
    analyzer = FakeAnalyzer({"emotion": "trust"})
    ai = FakeAIAnalyst({"emotion": "excitement"})

    analysis, remaining = AnalysisService(db_session, analyzer=analyzer, ai_analyst=ai).analyze_creative(
        user, creative.id
    )

    assert analysis.analysis_result == {"emotion": "trust"}
    assert analyzer.calls == [(None, "Hello", "Go")]
    assert ai.calls == []
    assert remaining == 4
    assert user.analysis_count == 1


def test_paid_account_uses_ai_analyst(db_session, user):
    user.payment_status = "paid"
    db_session.commit()
    creative = add_creative(db_session, user, ad_image_url="https://cdn.example.com/a.png")
    ai = FakeAIAnalyst({"emotion": "excitement"})

    analysis, remaining = AnalysisService(
        db_session, analyzer=FakeAnalyzer({}), ai_analyst=ai
    ).analyze_creative(user, creative.id)

    assert analysis.analysis_result == {"emotion": "excitement"}
    assert ai.calls == [("https://cdn.example.com/a.png", None, None)]
    assert remaining is None


def test_free_tier_limit_blocks_sixth_analysis(db_session, user):
    service = AnalysisService(db_session, analyzer=FakeAnalyzer({"emotion": "trust"}))
    creatives = [add_creative(db_session, user) for _ in range(6)]

    for creative in creatives[:5]:
        service.analyze_creative(user, creative.id)

    with pytest.raises(AnalysisLimitReached):
        service.analyze_creative(user, creatives[5].id)

    assert user.analysis_count == 5
    assert db_session.query(Analysis).count() == 5


def test_reanalysis_replaces_existing_analysis(db_session, user):
    creative = add_creative(db_session, user)
    AnalysisService(db_session, analyzer=FakeAnalyzer({"emotion": "trust"})).analyze_creative(user, creative.id)

    analysis, _ = AnalysisService(
        db_session, analyzer=FakeAnalyzer({"emotion": "urgency"})
    ).analyze_creative(user, creative.id)

    rows = db_session.query(Analysis).filter(Analysis.creative_id == creative.id).all()
    assert len(rows) == 1
    assert rows[0].id == analysis.id
    assert rows[0].analysis_result == {"emotion": "urgency"}
    assert user.analysis_count == 2


def test_analyzing_someone_elses_creative_is_not_found(db_session, user):
    other = User(id="user-2")
    db_session.add(other)
    db_session.commit()
    creative = add_creative(db_session, other)

    with pytest.raises(CreativeNotFound):
        AnalysisService(db_session, analyzer=FakeAnalyzer({})).analyze_creative(user, creative.id)

    with pytest.raises(CreativeNotFound):
        AnalysisService(db_session, analyzer=FakeAnalyzer({})).analyze_creative(user, "missing")


# Creatives

def test_create_competitor_creative(db_session, user):
    creative = ImportService(db_session).create_creative(
        user,
        source_type="competitor",
        brand_name="Rival Co",
        ad_copy="Discover our new line",
    )

    assert creative.id
    assert creative.source_type == "competitor"
    assert creative.performance == {}
    assert ImportService(db_session).list_creatives(user.id, "competitor") == [creative]
    assert ImportService(db_session).list_creatives(user.id, "own") == []


def test_create_creative_rejects_unknown_source(db_session, user):
    with pytest.raises(ValueError):
        ImportService(db_session).create_creative(user, source_type="partner")


def test_delete_creative_removes_its_analysis(db_session, user):
    creative = add_creative(db_session, user)
    AnalysisService(db_session, analyzer=FakeAnalyzer({"emotion": "trust"})).analyze_creative(user, creative.id)

    ImportService(db_session).delete_creative(user, creative.id)

    assert db_session.query(Creative).count() == 0
    assert db_session.query(Analysis).count() == 0


# Meta import

def test_parse_ad_converts_insights():
    ad = parse_ad({
        "id": "123",
        "name": "Ad",
        "creative": {"title": "Title only", "call_to_action_type": "LEARN_MORE"},
        "insights": {"data": [{"impressions": "1000", "clicks": "25", "ctr": "2.5", "spend": "10.10"}]},
    })

    assert ad["ad_copy"] == "Title only"
    assert ad["cta"] == "LEARN_MORE"
    assert ad["performance"] == {"impressions": 1000, "clicks": 25, "ctr": 2.5, "spend": 10.1}


def test_parse_ad_without_insights_has_no_metrics():
    assert parse_ad({"id": "123"})["performance"] == {}


def connect(db_session, user, expires_at=None):
    return ImportService(db_session).connect_meta(user, "token", "act_42", expires_at)


def test_import_meta_ads_creates_own_creatives(db_session, user):
    connect(db_session, user)

    result = ImportService(db_session, meta_client=FakeMetaClient(META_ADS)).import_meta_ads(user)

    assert result["imported"] == 2
    assert result["updated"] == 0
    creatives = {c.ad_id: c for c in db_session.query(Creative).all()}
    assert creatives["111"].source_type == "own"
    assert creatives["111"].brand_name == "Spring Sale"
    assert creatives["111"].cta == "SHOP_NOW"
    assert creatives["111"].performance["ctr"] == 3.0
    assert creatives["222"].brand_name == "Imported Ad"


def test_reimport_refreshes_performance_without_duplicates(db_session, user):
    connect(db_session, user)
    ImportService(db_session, meta_client=FakeMetaClient(META_ADS)).import_meta_ads(user)

    refreshed = [dict(META_ADS[0], performance={"impressions": 2000, "clicks": 80, "ctr": 4.0})]
    result = ImportService(db_session, meta_client=FakeMetaClient(refreshed)).import_meta_ads(user)

    assert result["imported"] == 0
    assert result["updated"] == 1
    assert db_session.query(Creative).count() == 2
    creative = db_session.query(Creative).filter(Creative.ad_id == "111").one()
    assert creative.performance == {"impressions": 2000, "clicks": 80, "ctr": 4.0}


def test_import_requires_connected_account(db_session, user):
    with pytest.raises(MetaAccountNotConnected):
        ImportService(db_session, meta_client=FakeMetaClient([])).import_meta_ads(user)


def test_import_rejects_expired_token(db_session, user):
    connect(db_session, user, expires_at=datetime.now(timezone.utc) - timedelta(days=1))

    with pytest.raises(MetaTokenExpired):
        ImportService(db_session, meta_client=FakeMetaClient([])).import_meta_ads(user)


# Scheduler

def test_daily_job_imports_for_connected_accounts(db_session, session_factory, monkeypatch):
    db_session.add_all([
        User(id="connected", meta_access_token="t1", meta_ad_account_id="act_1",
             meta_token_expires_at=datetime.utcnow() + timedelta(days=30)),
        User(id="expired", meta_access_token="t2", meta_ad_account_id="act_2",
             meta_token_expires_at=datetime.utcnow() - timedelta(days=1)),
        User(id="unconnected"),
    ])
    db_session.commit()
    monkeypatch.setattr(
        import_service, "MetaAPIClient", lambda token, account_id: FakeMetaClient(META_ADS[:1])
    )

    succeeded = DailyImportScheduler(session_factory=session_factory).run_daily_job()

    assert succeeded == 1
    db_session.expire_all()
    imported = db_session.query(Creative).all()
    assert [(c.user_id, c.ad_id) for c in imported] == [("connected", "111")]


def test_connect_meta_rolls_back_failed_commit(db_session, user, monkeypatch):
    def failing_commit():
        raise RuntimeError("database is locked")

    monkeypatch.setattr(db_session, "commit", failing_commit)

    with pytest.raises(RuntimeError):
        connect(db_session, user)

    monkeypatch.undo()
    db_session.expire_all()
    assert user.meta_access_token is None
    assert user.meta_ad_account_id is None
