from fastapi import APIRouter, HTTPException, Request, status
from loguru import logger
from pydantic import BaseModel

from passforge.breach import BreachChecker
from passforge.entities import (
    EmptyInput,
    GenerationOptions,
    InvalidOptions,
    LookupUnavailable,
    StrengthAnalysis,
)
from passforge.generator import generate
from passforge.strength import analyze


router = APIRouter()


class CredentialPayload(BaseModel):
    password: str


class AnalysisResponse(BaseModel):
    analysis: StrengthAnalysis | None


class GeneratedPassword(BaseModel):
    password: str


class BreachResponse(BaseModel):
    hash_prefix: str
    match_found: bool
    occurrence_count: int


@router.post("/analyze")
async def analyze_password(payload: CredentialPayload) -> AnalysisResponse:
    # Empty input is a reset, not an error
    return AnalysisResponse(analysis=analyze(payload.password))


@router.post("/generate")
async def generate_password(options: GenerationOptions) -> GeneratedPassword:
    try:
        return GeneratedPassword(password=generate(options))
    except InvalidOptions as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


@router.post("/breach")
async def check_breach(payload: CredentialPayload, request: Request) -> BreachResponse:
    checker = BreachChecker(request.app.state.breach_transport)
    try:
        record = await checker.check(payload.password)
    except EmptyInput as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please enter a password to check.",
        ) from e
    except LookupUnavailable as e:
        logger.warning(f"Breach check unavailable: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Unable to check password at this time. Please try again later.",
        ) from e

    return BreachResponse(
        hash_prefix=record.hash_prefix,
        match_found=record.match_found,
        occurrence_count=record.occurrence_count,
    )
