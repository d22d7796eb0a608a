"""
Chat Endpoints

Supportive replies to client chat messages. Always answers: when the
AI model is unavailable or misbehaves the reply comes from the
rule-based fallback.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from zentia.api.dependencies import get_therapy_service
from zentia.services.ai.therapy_ai_service import TherapyAIService

router = APIRouter()


class ChatRequest(BaseModel):
    """Chat message from a client."""

    message: str = Field(..., min_length=1, max_length=4000, description="User message")
    client_id: Optional[str] = Field(default=None, description="Client to personalize for")
    therapeutic_contact: bool = Field(
        default=False,
        description="Include the client's therapy notes in the prompt",
    )
    additional_context: Optional[str] = Field(default=None, max_length=4000)

    model_config = {
        "json_schema_extra": {
            "example": {
                "message": "I'm very anxious about work",
                "client_id": "123e4567-e89b-12d3-a456-426614174000",
                "therapeutic_contact": True,
            }
        }
    }


@router.post(
    "",
    summary="Generate chat response",
    description="Reply to a chat message with content and triage metadata",
)
async def create_chat_response(
    request: ChatRequest,
    service: TherapyAIService = Depends(get_therapy_service),
) -> dict:
    """
    Generate a reply to a chat message.

    Response uses camelCase wire names:
    `{content, metadata: {detectedEmotions, identifiedTriggers,
    suggestedStrategies, urgencyLevel, therapeuticReferences}}`.
    """
    response = await service.generate_chat_response(
        request.message,
        client_id=request.client_id,
        therapeutic_contact=request.therapeutic_contact,
        additional_context=request.additional_context,
    )
    return response.to_dict()
