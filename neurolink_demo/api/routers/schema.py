"""Structured output endpoint.

Asks for JSON matching one of a few predefined schemas and returns the
parsed object alongside the raw text.
"""

import json
import logging
import re
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from neurolink_demo.llm import FallbackSequencer

from ..dependencies import get_sequencer
from ..responses import success_response
from .use_cases import run_template

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Structured Output"])

DEFAULT_SCHEMA_TYPE = "user-profile"
SCHEMA_MAX_TOKENS = 400
SCHEMA_TEMPERATURE = 0.7

SCHEMAS: Dict[str, Dict[str, Any]] = {
    "user-profile": {
        "prompt": (
            "Generate a user profile for a fictional character including name, age, "
            "occupation, and hobbies."
        ),
        "schema": {
            "type": "object",
            "properties": {
                "name": {"type": "string"},
                "age": {"type": "number"},
                "occupation": {"type": "string"},
                "hobbies": {"type": "array", "items": {"type": "string"}},
            },
            "required": ["name", "age", "occupation", "hobbies"],
        },
    },
    "product-review": {
        "prompt": (
            "Generate a product review for a smartphone including rating, pros, cons, "
            "and recommendation."
        ),
        "schema": {
            "type": "object",
            "properties": {
                "product": {"type": "string"},
                "rating": {"type": "number", "minimum": 1, "maximum": 5},
                "pros": {"type": "array", "items": {"type": "string"}},
                "cons": {"type": "array", "items": {"type": "string"}},
                "recommendation": {"type": "string"},
            },
            "required": ["product", "rating", "pros", "cons", "recommendation"],
        },
    },
    "meeting-notes": {
        "prompt": (
            "Generate meeting notes for a project planning session including attendees, "
            "decisions, and action items."
        ),
        "schema": {
            "type": "object",
            "properties": {
                "title": {"type": "string"},
                "date": {"type": "string"},
                "attendees": {"type": "array", "items": {"type": "string"}},
                "decisions": {"type": "array", "items": {"type": "string"}},
                "actionItems": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "task": {"type": "string"},
                            "assignee": {"type": "string"},
                            "dueDate": {"type": "string"},
                        },
                    },
                },
            },
            "required": ["title", "date", "attendees", "decisions", "actionItems"],
        },
    },
}

_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


class SchemaRequest(BaseModel):
    type: str = Field(DEFAULT_SCHEMA_TYPE, description="Predefined schema name")


def build_schema_prompt(prompt: str, schema: Dict[str, Any]) -> str:
    return (
        f"{prompt}\n\n"
        f"Respond only with a JSON object matching this JSON schema:\n"
        f"{json.dumps(schema)}"
    )


def parse_structured_output(text: str) -> Any:
    """Parse model output as JSON, tolerating a surrounding markdown code fence.

    Raises:
        ValueError: The text is not valid JSON
    """
    stripped = text.strip()
    match = _CODE_FENCE.match(stripped)
    if match:
        stripped = match.group(1)
    return json.loads(stripped)


@router.post("/schema")
async def structured_output(
    request: SchemaRequest,
    sequencer: FallbackSequencer = Depends(get_sequencer),
):
    """Generate JSON for one of the predefined schemas; unknown names use user-profile."""
    selected = SCHEMAS.get(request.type, SCHEMAS[DEFAULT_SCHEMA_TYPE])
    logger.info(f"[Schema] Testing structured output for type: {request.type}")

    prompt = build_schema_prompt(selected["prompt"], selected["schema"])
    result = await run_template(
        sequencer, prompt, max_tokens=SCHEMA_MAX_TOKENS, temperature=SCHEMA_TEMPERATURE
    )

    try:
        structured = parse_structured_output(result.content)
    except ValueError as e:
        logger.error(f"[Schema] Error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to parse structured output: {e}"
        )

    return success_response({
        "structured_data": structured,
        "raw_text": result.content,
        "provider": result.provider,
        "usage": result.usage,
        "schema": selected["schema"],
    })
