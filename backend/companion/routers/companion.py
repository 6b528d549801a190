# companion router — the four entry points of the companion engine
# mood picker, journal editor, chat and the scheduled check-in all land here

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from companion.models.companion import (
    CheckinRequest,
    CheckinResult,
    JournalAnalysisRequest,
    JournalAnalysisResult,
    MoodTriggerRequest,
    MoodTriggerResult,
    TherapyHistoryResult,
    TherapyMessageRequest,
)
from companion.services import companion_service
from companion.services.companion_service import CompanionValidationError
from companion.services.db import Database, get_db
from companion.services.text_generation import TextGenerator, get_text_generator

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/companion", tags=["companion"])


def _unprocessable(e: CompanionValidationError) -> HTTPException:
    logger.info(f"Rejected companion request: {e}")
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))


@router.post("/mood", response_model=MoodTriggerResult, response_model_by_alias=True)
async def mood_trigger(
    body: MoodTriggerRequest,
    db: Database = Depends(get_db),
    generator: TextGenerator = Depends(get_text_generator),
):
    """respond to a newly logged mood"""
    try:
        return await companion_service.handle_mood_trigger(
            db, generator, body.mood, trigger=body.trigger, user_id=body.user_id
        )
    except CompanionValidationError as e:
        raise _unprocessable(e)


@router.post("/journal", response_model=JournalAnalysisResult, response_model_by_alias=True)
async def journal_analysis(
    body: JournalAnalysisRequest,
    db: Database = Depends(get_db),
    generator: TextGenerator = Depends(get_text_generator),
):
    """reflect on a submitted journal entry"""
    try:
        return await companion_service.analyze_journal_entry(
            db, generator, body.content, user_id=body.user_id, mood=body.mood
        )
    except CompanionValidationError as e:
        raise _unprocessable(e)


@router.post("/therapy", response_model=TherapyHistoryResult, response_model_by_alias=True)
async def therapy_history(
    body: TherapyMessageRequest,
    db: Database = Depends(get_db),
    generator: TextGenerator = Depends(get_text_generator),
):
    """answer a chat message using recent therapy sessions"""
    try:
        return await companion_service.integrate_therapy_history(
            db, generator, body.message, user_id=body.user_id
        )
    except CompanionValidationError as e:
        raise _unprocessable(e)


@router.post("/checkin", response_model=CheckinResult, response_model_by_alias=True)
async def proactive_checkin(
    body: CheckinRequest,
    db: Database = Depends(get_db),
    generator: TextGenerator = Depends(get_text_generator),
):
    """build a proactive check-in for the user"""
    return await companion_service.generate_proactive_checkin(db, generator, user_id=body.user_id)
