import logging

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import (
    get_description_enhancer,
    get_onet_client,
    get_pipeline,
)
from models.requests import EnhanceDescriptionRequest, ProcessSkillsRequest
from models.responses import HealthResponse, ProcessSkillsResponse, SkillLookupResponse
from models.schemas.description import StructuredDescription
from models.schemas.taxonomy import OccupationMatch
from services.description_enhancer import DescriptionEnhancer
from services.onet_client import OnetClient
from services.remote_lookup import RemoteAuthError, RemoteLookupError
from services.skill_pipeline import SkillPipeline
from services.text_normalizer import normalize

logger = logging.getLogger(__name__)

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)


@router.get("/health", response_model=HealthResponse)
async def health(
    pipeline: SkillPipeline = Depends(get_pipeline),
    onet: OnetClient = Depends(get_onet_client),
    enhancer: DescriptionEnhancer = Depends(get_description_enhancer),
):
    return HealthResponse(
        status="ok",
        skills_cached=len(pipeline.cache),
        onet_configured=onet.configured,
        llm_configured=enhancer.available,
    )


@router.post("/skills/process", response_model=ProcessSkillsResponse)
@limiter.limit("30/minute")
async def process_skills(
    request: Request,
    body: ProcessSkillsRequest,
    pipeline: SkillPipeline = Depends(get_pipeline),
    onet: OnetClient = Depends(get_onet_client),
):
    if not body.live:
        return ProcessSkillsResponse(skills=pipeline.process(body.skills))

    if not onet.configured:
        raise HTTPException(status_code=503, detail="O*NET API key not configured")
    skills = await pipeline.process_with_remote(body.skills, onet)
    return ProcessSkillsResponse(skills=skills)


@router.get("/skills/lookup", response_model=SkillLookupResponse)
async def lookup_skill(
    skill: str = Query(..., min_length=1, max_length=200),
    pipeline: SkillPipeline = Depends(get_pipeline),
):
    normalized = normalize(skill)
    record = pipeline.cache.get(normalized) if normalized else None
    if record is None:
        raise HTTPException(status_code=404, detail=f"Skill not in cache: {skill}")

    return SkillLookupResponse(
        skill=skill,
        normalized=record.normalized,
        matched=record.onet is not None,
        canonical_name=record.onet.canonical_name if record.onet else record.normalized,
        onet=record.onet,
    )


@router.get("/occupations/match", response_model=OccupationMatch)
@limiter.limit("20/minute")
async def match_occupation(
    request: Request,
    title: str = Query(..., min_length=1, max_length=200),
    onet: OnetClient = Depends(get_onet_client),
):
    if not onet.configured:
        raise HTTPException(status_code=503, detail="O*NET API key not configured")

    try:
        match = await onet.find_occupation(title)
    except RemoteAuthError as e:
        logger.error("Occupation lookup rejected: %s", e)
        raise HTTPException(status_code=503, detail="O*NET rejected the configured credentials")
    except RemoteLookupError as e:
        logger.warning("Occupation lookup failed for %r: %s", title, e)
        raise HTTPException(status_code=502, detail="O*NET lookup failed")

    if match is None:
        raise HTTPException(status_code=404, detail=f"No occupation found for: {title}")
    return match


@router.post("/enhance-description", response_model=StructuredDescription)
@limiter.limit("10/minute")
async def enhance_description(
    request: Request,
    body: EnhanceDescriptionRequest,
    enhancer: DescriptionEnhancer = Depends(get_description_enhancer),
):
    if not body.description.strip():
        raise HTTPException(status_code=400, detail="Description is empty")

    structured = await enhancer.enhance(body.description)
    if structured is None:
        raise HTTPException(status_code=503, detail="Description restructuring unavailable")
    return structured


@router.get("/occupations/{code}")
@limiter.limit("20/minute")
async def occupation_details(
    request: Request,
    code: str = Path(..., pattern=r"^\d{2}-\d{4}\.\d{2}$"),
    onet: OnetClient = Depends(get_onet_client),
):
    if not onet.configured:
        raise HTTPException(status_code=503, detail="O*NET API key not configured")

    try:
        details = await onet.get_occupation(code)
    except RemoteAuthError as e:
        logger.error("Occupation details rejected: %s", e)
        raise HTTPException(status_code=503, detail="O*NET rejected the configured credentials")
    except RemoteLookupError as e:
        logger.warning("Occupation details failed for %s: %s", code, e)
        raise HTTPException(status_code=502, detail="O*NET lookup failed")

    if details is None:
        raise HTTPException(status_code=404, detail=f"Unknown occupation code: {code}")
    return details
