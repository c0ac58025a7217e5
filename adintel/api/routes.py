"""API route definitions."""

from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.orm import Session
from adintel.database import get_db
from adintel.models import Analysis, Creative, User, SOURCE_OWN
from adintel.services import ImportService, AnalysisService, DashboardService
from adintel.services.exceptions import (
    AnalysisLimitReached,
    CreativeNotFound,
    MetaAccountNotConnected,
    MetaTokenExpired,
)
from datetime import datetime
from typing import Dict, Literal, Optional, Union
from pydantic import BaseModel, Field
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


# Request Models
class CreativeCreateRequest(BaseModel):
    source_type: Literal["own", "competitor"] = SOURCE_OWN
    brand_name: Optional[str] = None
    ad_image_url: Optional[str] = None
    ad_copy: Optional[str] = Field(default=None, max_length=5000)
    cta: Optional[str] = Field(default=None, max_length=100)
    performance: Dict[str, Union[int, float]] = Field(default_factory=dict)


class MetaConnectRequest(BaseModel):
    access_token: str
    ad_account_id: str
    expires_at: Optional[datetime] = None


# Serializers
def serialize_creative(creative: Creative) -> Dict:
    return {
        "id": creative.id,
        "user_id": creative.user_id,
        "source_type": creative.source_type,
        "brand_name": creative.brand_name,
        "ad_id": creative.ad_id,
        "ad_image_url": creative.ad_image_url,
        "ad_copy": creative.ad_copy,
        "cta": creative.cta,
        "performance": creative.performance or {},
        "created_at": creative.created_at.isoformat() if creative.created_at else None,
    }


def serialize_analysis(analysis: Analysis) -> Dict:
    return {
        "id": analysis.id,
        "creative_id": analysis.creative_id,
        "analysis_result": analysis.analysis_result or {},
        "created_at": analysis.created_at.isoformat() if analysis.created_at else None,
    }


# Identity
def get_current_user(
    x_user_id: Optional[str] = Header(default=None),
    x_user_email: Optional[str] = Header(default=None),
    db: Session = Depends(get_db)
) -> User:
    """Resolve the caller's account, creating the profile on first use."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")

    user = db.query(User).filter(User.id == x_user_id).first()
    if user:
        return user

    logger.info(f"User profile not found, creating {x_user_id}")
    user = User(id=x_user_id, email=x_user_email)
    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to create user profile: {e}")
        raise HTTPException(status_code=500, detail="Failed to get user profile")
    return user


# Health Check
@router.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


# Creatives
@router.get("/creatives")
async def list_creatives(
    source_type: Optional[str] = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List the caller's creatives, newest first."""
    creatives = ImportService(db).list_creatives(user.id, source_type)
    return [serialize_creative(c) for c in creatives]


@router.post("/creatives", status_code=201)
async def create_creative(
    request: CreativeCreateRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create a manual or competitor creative."""
    try:
        creative = ImportService(db).create_creative(
            user,
            source_type=request.source_type,
            brand_name=request.brand_name,
            ad_image_url=request.ad_image_url,
            ad_copy=request.ad_copy,
            cta=request.cta,
            performance=request.performance,
        )
        return serialize_creative(creative)
    except Exception as e:
        logger.error(f"Error creating creative: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/creatives/{creative_id}", status_code=204)
async def delete_creative(
    creative_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a creative and its analysis."""
    try:
        ImportService(db).delete_creative(user, creative_id)
    except CreativeNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error deleting creative: {e}")
        raise HTTPException(status_code=500, detail=str(e))


# Analysis
@router.post("/creatives/{creative_id}/analyze")
async def analyze_creative(
    creative_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Analyze a creative with the analyzer for the caller's tier."""
    try:
        analysis, remaining = AnalysisService(db).analyze_creative(user, creative_id)
        return {
            "analysis": serialize_analysis(analysis),
            "remaining_analyses": remaining,
        }
    except CreativeNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except AnalysisLimitReached as e:
        raise HTTPException(
            status_code=403,
            detail={
                "error": "Analysis limit reached",
                "message": str(e),
                "requiresUpgrade": True,
            }
        )
    except Exception as e:
        logger.error(f"Error analyzing creative: {e}")
        raise HTTPException(status_code=500, detail="Analysis failed")


@router.get("/creatives/{creative_id}/analysis")
async def get_analysis(
    creative_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get the stored analysis of a creative."""
    analysis = AnalysisService(db).get_analysis(user, creative_id)
    if not analysis:
        raise HTTPException(status_code=404, detail=f"No analysis for creative {creative_id}")
    return serialize_analysis(analysis)


# Meta Import
@router.post("/meta/connect")
async def connect_meta(
    request: MetaConnectRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Store the caller's Meta access token and ad account."""
    try:
        user = ImportService(db).connect_meta(
            user,
            request.access_token,
            request.ad_account_id,
            request.expires_at,
        )
        return {
            "connected": True,
            "ad_account_id": user.meta_ad_account_id,
            "expires_at": user.meta_token_expires_at.isoformat(),
        }
    except Exception as e:
        logger.error(f"Error connecting Meta account: {e}")
        raise HTTPException(status_code=500, detail="Failed to connect Meta account")


@router.post("/meta/import-ads")
async def import_meta_ads(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Import ads from the caller's connected Meta ad account."""
    try:
        result = ImportService(db).import_meta_ads(user)
        return {
            "success": True,
            "imported": result["imported"],
            "updated": result["updated"],
            "total": result["total"],
            "ads": [serialize_creative(c) for c in result["creatives"]],
        }
    except MetaAccountNotConnected as e:
        raise HTTPException(
            status_code=400,
            detail={"error": str(e), "requiresConnection": True}
        )
    except MetaTokenExpired as e:
        raise HTTPException(
            status_code=401,
            detail={"error": str(e), "requiresReconnection": True}
        )
    except Exception as e:
        logger.error(f"Meta import error: {e}")
        raise HTTPException(status_code=500, detail="Failed to import ads")


# Dashboard
@router.get("/dashboard/metrics")
async def get_dashboard_metrics(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Creative diversity, top insight and performance stats."""
    return DashboardService(db).get_metrics(user.id)


@router.get("/dashboard/diversity-breakdown")
async def get_diversity_breakdown(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Per-dimension detail of the creative diversity score."""
    return DashboardService(db).get_diversity_breakdown(user.id)
