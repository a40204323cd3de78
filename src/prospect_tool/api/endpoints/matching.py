"""Candidate skill match endpoints"""
from fastapi import APIRouter, HTTPException

from src.prospect_tool.api.deps import CurrentUser
from src.prospect_tool.schemas.matching import (
    SkillGapReport,
    SkillGapRequest,
    SkillMatchRequest,
    SkillMatchResponse,
)
from src.prospect_tool.services.skill_match import analyze_skill_gaps, describe_match, score_skills

router = APIRouter(prefix="/match", tags=["Matching"])


@router.post("/score", response_model=SkillMatchResponse)
def score_candidate(request: SkillMatchRequest, current_user: CurrentUser):
    """Label and color are null when the job lists no required skills."""
    result = score_skills(request.candidate_skills, request.required_skills)
    return SkillMatchResponse(**result.model_dump(), **describe_match(result.match_percentage))


@router.post("/skill-gaps", response_model=SkillGapReport)
def skill_gaps(request: SkillGapRequest, current_user: CurrentUser):
    try:
        return analyze_skill_gaps(request.candidates, request.required_skills)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
