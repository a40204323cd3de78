"""Skill match schemas"""
from typing import List, Optional
from pydantic import BaseModel


class SkillMatchResult(BaseModel):
    matched: List[str]
    missing: List[str]
    extra: List[str]
    match_percentage: Optional[int]


class SkillMatchRequest(BaseModel):
    candidate_skills: List[str] = []
    required_skills: List[str] = []


class SkillMatchResponse(SkillMatchResult):
    label: Optional[str] = None
    color: Optional[str] = None


class CandidateSkills(BaseModel):
    id: str
    skills: Optional[List[str]] = None


class SkillGapRequest(BaseModel):
    candidates: List[CandidateSkills]
    required_skills: List[str]


class SkillGapData(BaseModel):
    skill: str
    missing_count: int
    total_candidates: int
    percentage: int


class PoolHealth(BaseModel):
    excellent: List[str] = []
    good: List[str] = []
    fair: List[str] = []
    low: List[str] = []


class SkillGapReport(BaseModel):
    skill_gaps: List[SkillGapData]
    pool_health: PoolHealth
    total_candidates: int
    recommendations: List[str]
