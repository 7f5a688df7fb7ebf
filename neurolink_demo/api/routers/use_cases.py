"""Prompt-template endpoints.

Each route fills a fixed prompt template from the request body and sends it
through the fallback sequencer with ``"auto"`` provider selection.
"""

import logging
from enum import Enum
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from neurolink_demo.llm import (
    AUTO_PROVIDER,
    AllProvidersFailedError,
    FallbackSequencer,
    GenerationOptions,
    GenerationResult,
)

from ..dependencies import get_sequencer
from ..responses import success_response

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Use Cases"])


# =============================================================================
# Templates
# =============================================================================

class EmailType(str, Enum):
    MARKETING = "marketing"
    SUPPORT = "support"
    FOLLOW_UP = "follow-up"


class SummaryLength(str, Enum):
    BRIEF = "brief"
    MEDIUM = "medium"
    DETAILED = "detailed"


class WritingType(str, Enum):
    STORY = "story"
    POEM = "poem"
    DIALOGUE = "dialogue"


class IdeaType(str, Enum):
    BLOG = "blog"
    SOCIAL = "social"
    VIDEO = "video"


EMAIL_PROMPTS = {
    EmailType.MARKETING: (
        "Write a professional marketing email about: {context}. Include a compelling "
        "subject line, engaging body text, and clear call-to-action."
    ),
    EmailType.SUPPORT: (
        "Write a helpful customer support email response for: {context}. Be empathetic, "
        "solution-focused, and professional."
    ),
    EmailType.FOLLOW_UP: (
        "Write a polite follow-up email regarding: {context}. Be courteous, specific about "
        "next steps, and include timeline."
    ),
}

ANALYSIS_PROMPT = """Analyze this CSV data and provide insights, trends, and recommendations:

{data}

Please provide:
1. Key insights and patterns
2. Statistical observations
3. Business recommendations
4. Potential areas for improvement"""

SUMMARY_PROMPTS = {
    SummaryLength.BRIEF: "Summarize this text in 1-2 concise sentences: {text}",
    SummaryLength.MEDIUM: "Provide a comprehensive paragraph summary of this text: {text}",
    SummaryLength.DETAILED: (
        "Create a detailed summary with key points, main ideas, and important details: {text}"
    ),
}
SUMMARY_TOKEN_LIMITS = {SummaryLength.BRIEF: 100, SummaryLength.MEDIUM: 200, SummaryLength.DETAILED: 400}

WRITING_PROMPTS = {
    WritingType.STORY: (
        "You are a creative writer. Write an engaging short story based on: {prompt}. Include "
        "vivid descriptions, character development, and a compelling narrative arc."
    ),
    WritingType.POEM: (
        "You are a poet. Create a beautiful, evocative poem inspired by: {prompt}. Use imagery, "
        "rhythm, and emotional depth."
    ),
    WritingType.DIALOGUE: (
        "You are a screenwriter. Write realistic, engaging dialogue between characters in this "
        "scenario: {prompt}. Make it natural and character-driven."
    ),
}

TRANSLATION_PROMPT = """Translate the following text to {language}, maintaining tone and context:

"{text}"

Provide only the translation:"""

IDEA_PROMPTS = {
    IdeaType.BLOG: (
        "Generate 10 compelling blog post ideas about {topic}. Include catchy titles and brief "
        "descriptions for each."
    ),
    IdeaType.SOCIAL: (
        "Create 10 engaging social media post ideas about {topic}. Include platform-specific "
        "suggestions and hashtag recommendations."
    ),
    IdeaType.VIDEO: (
        "Generate 10 video content ideas about {topic}. Include concept, target audience, and "
        "key talking points for each."
    ),
}

CODE_PROMPT = """Generate clean, well-commented {language} code for: {description}

Requirements:
- Follow best practices for {language}
- Include proper error handling
- Add clear comments explaining the logic
- Make it production-ready

Code:"""

API_DOC_PROMPT = """Create comprehensive API documentation for: {description}

Include:
- Endpoint descriptions
- Request/response examples
- Parameter definitions
- Error codes and messages
- Authentication requirements
- Usage examples in multiple languages

Documentation:"""

DEBUG_PROMPT = """Analyze this error and provide debugging help:

{error}

Please provide:
1. Explanation of what the error means
2. Most likely causes
3. Step-by-step debugging approach
4. Code examples of potential fixes
5. Best practices to prevent similar issues

Analysis:"""


# =============================================================================
# Request Models
# =============================================================================

class EmailRequest(BaseModel):
    type: EmailType = Field(EmailType.MARKETING, description="Kind of email")
    context: str = Field(..., description="What the email is about")


class AnalyzeDataRequest(BaseModel):
    data: str = Field(..., description="CSV data to analyze")


class SummarizeRequest(BaseModel):
    text: str = Field(..., description="Text to summarize")
    length: SummaryLength = Field(SummaryLength.MEDIUM, description="Summary length")


class WritingRequest(BaseModel):
    type: WritingType = Field(WritingType.STORY, description="Kind of creative piece")
    prompt: str = Field(..., description="Subject or scenario")


class TranslateRequest(BaseModel):
    text: str = Field(..., description="Text to translate")
    language: str = Field(..., description="Target language")


class IdeasRequest(BaseModel):
    type: IdeaType = Field(IdeaType.BLOG, description="Target platform")
    topic: str = Field(..., description="Topic to brainstorm")


class CodeRequest(BaseModel):
    language: str = Field(..., description="Programming language")
    description: str = Field(..., description="What the code should do")


class ApiDocRequest(BaseModel):
    description: str = Field(..., description="API to document")


class DebugRequest(BaseModel):
    error: str = Field(..., description="Error message or stack trace")


# =============================================================================
# Helpers
# =============================================================================

async def run_template(
    sequencer: FallbackSequencer,
    prompt: str,
    max_tokens: int,
    temperature: float,
) -> GenerationResult:
    """Send a filled template with 'auto' provider selection."""
    options = GenerationOptions(max_tokens=max_tokens, temperature=temperature)
    try:
        return await sequencer.generate(AUTO_PROVIDER, prompt, options)
    except AllProvidersFailedError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=e.message
        )


def content_response(result: GenerationResult, content: Optional[str] = None) -> Dict[str, Any]:
    return success_response({
        "content": result.content if content is None else content,
        "usage": result.usage,
    })


# =============================================================================
# Business
# =============================================================================

@router.post("/business/email")
async def business_email(
    request: EmailRequest,
    sequencer: FallbackSequencer = Depends(get_sequencer),
):
    """Generate a professional business email."""
    prompt = EMAIL_PROMPTS[request.type].format(context=request.context)
    result = await run_template(sequencer, prompt, max_tokens=400, temperature=0.7)
    return content_response(result)


@router.post("/business/analyze-data")
async def business_analyze_data(
    request: AnalyzeDataRequest,
    sequencer: FallbackSequencer = Depends(get_sequencer),
):
    """Analyze CSV data and suggest business actions."""
    prompt = ANALYSIS_PROMPT.format(data=request.data)
    result = await run_template(sequencer, prompt, max_tokens=600, temperature=0.3)
    return content_response(result)


@router.post("/business/summarize")
async def business_summarize(
    request: SummarizeRequest,
    sequencer: FallbackSequencer = Depends(get_sequencer),
):
    """Summarize a document at the requested length."""
    prompt = SUMMARY_PROMPTS[request.length].format(text=request.text)
    result = await run_template(
        sequencer, prompt, max_tokens=SUMMARY_TOKEN_LIMITS[request.length], temperature=0.4
    )
    return content_response(result)


# =============================================================================
# Creative
# =============================================================================

@router.post("/creative/writing")
async def creative_writing(
    request: WritingRequest,
    sequencer: FallbackSequencer = Depends(get_sequencer),
):
    """Write a story, poem or dialogue."""
    prompt = WRITING_PROMPTS[request.type].format(prompt=request.prompt)
    result = await run_template(sequencer, prompt, max_tokens=500, temperature=0.8)
    return content_response(result)


@router.post("/creative/translate")
async def creative_translate(
    request: TranslateRequest,
    sequencer: FallbackSequencer = Depends(get_sequencer),
):
    """Translate text, keeping tone and context."""
    prompt = TRANSLATION_PROMPT.format(language=request.language, text=request.text)
    result = await run_template(sequencer, prompt, max_tokens=300, temperature=0.3)
    return content_response(result, content=result.content.strip())


@router.post("/creative/ideas")
async def creative_ideas(
    request: IdeasRequest,
    sequencer: FallbackSequencer = Depends(get_sequencer),
):
    """Brainstorm content ideas for a platform."""
    prompt = IDEA_PROMPTS[request.type].format(topic=request.topic)
    result = await run_template(sequencer, prompt, max_tokens=500, temperature=0.7)
    return content_response(result)


# =============================================================================
# Developer
# =============================================================================

@router.post("/developer/code")
async def developer_code(
    request: CodeRequest,
    sequencer: FallbackSequencer = Depends(get_sequencer),
):
    """Generate commented code in the requested language."""
    prompt = CODE_PROMPT.format(language=request.language, description=request.description)
    result = await run_template(sequencer, prompt, max_tokens=600, temperature=0.4)
    return content_response(result)


@router.post("/developer/api-doc")
async def developer_api_doc(
    request: ApiDocRequest,
    sequencer: FallbackSequencer = Depends(get_sequencer),
):
    prompt = API_DOC_PROMPT.format(description=request.description)
    result = await run_template(sequencer, prompt, max_tokens=800, temperature=0.3)
    return content_response(result)


@router.post("/developer/debug")
async def developer_debug(
    request: DebugRequest,
    sequencer: FallbackSequencer = Depends(get_sequencer),
):
    prompt = DEBUG_PROMPT.format(error=request.error)
    result = await run_template(sequencer, prompt, max_tokens=600, temperature=0.4)
    return content_response(result)
