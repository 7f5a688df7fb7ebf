"""FastAPI application for the NeuroLink demo server.

This module provides provider status, text generation with fallback,
benchmarking, prompt-template use cases, structured output, usage
analytics and Prometheus metrics.
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from neurolink_demo import __version__
from neurolink_demo.config import DemoConfig, load_config, setup_logging
from neurolink_demo.llm import (
    ALL_PROVIDERS,
    AUTO_PROVIDER,
    AllProvidersFailedError,
    FallbackChainConfig,
    FallbackSequencer,
    GenerationOptions,
    ProviderProber,
    UsageStats,
    best_provider,
    is_fallback_enabled,
)
from neurolink_demo.llm.registry import is_known_provider
from neurolink_demo.metrics import render_metrics

from . import dependencies
from .dependencies import get_demo_config, get_prober, get_sequencer, get_usage_stats
from .responses import error_response, success_response, timestamp
from .routers import schema_router, use_cases_router

logger = logging.getLogger(__name__)

BENCHMARK_PROMPT = "Write a haiku about artificial intelligence."
BENCHMARK_MAX_TOKENS = 100
BENCHMARK_TEMPERATURE = 0.7


def _load_demo_config() -> DemoConfig:
    load_dotenv()
    return load_config(os.getenv("NEUROLINK_DEMO_CONFIG"))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    dependencies.demo_config = _load_demo_config()
    setup_logging(dependencies.demo_config)
    logger.info("Starting NeuroLink demo API...")

    chain_config = FallbackChainConfig()
    dependencies.usage_stats = UsageStats()
    dependencies.prober = ProviderProber(config=chain_config)
    dependencies.sequencer = FallbackSequencer(config=chain_config, usage=dependencies.usage_stats)
    logger.info(f"NeuroLink demo API started with {len(ALL_PROVIDERS)} providers")

    yield

    # Shutdown
    logger.info("Shutting down NeuroLink demo API...")


app = FastAPI(
    title="NeuroLink Demo API",
    version=__version__,
    description="Multi-provider text generation with automatic fallback",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_load_demo_config().server.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(use_cases_router, prefix="/api")
app.include_router(schema_router, prefix="/api")


# Pydantic models for API
class GenerateRequest(BaseModel):
    """Request model for text generation."""
    provider: str = Field(AUTO_PROVIDER, description="Provider name or 'auto'")
    prompt: str = Field("", description="The prompt to send")
    max_tokens: Optional[int] = Field(None, description="Output budget override")
    temperature: Optional[float] = Field(None, description="Sampling temperature override")
    system_prompt: Optional[str] = Field(None, description="System prompt")
    timeout: Optional[float] = Field(None, gt=0, description="Per-attempt timeout in seconds")


# Health check endpoints
@app.get("/")
async def read_root():
    """Root endpoint."""
    return {
        "message": "NeuroLink Demo API",
        "version": __version__,
        "status": "operational"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    components = {
        "api": "healthy",
        "prober": "healthy" if dependencies.prober else "unavailable",
        "sequencer": "healthy" if dependencies.sequencer else "unavailable",
        "usage_stats": "healthy" if dependencies.usage_stats else "unavailable",
    }
    overall_status = "healthy" if all(
        state == "healthy" for state in components.values()
    ) else "degraded"

    return {
        "status": overall_status,
        "timestamp": timestamp(),
        "version": __version__,
        "components": components,
    }


# Provider status endpoints
@app.get("/api/status")
async def provider_status(
    provider_prober: ProviderProber = Depends(get_prober),
    config: DemoConfig = Depends(get_demo_config),
):
    """Probe every provider in priority order."""
    statuses = await provider_prober.probe_all()
    return {
        "timestamp": timestamp(),
        "providers": {name: s.to_dict() for name, s in statuses.items()},
        "best_provider": best_provider(statuses),
        "configuration": {
            "default_provider": config.providers.default_provider,
            "streaming_enabled": config.providers.streaming_enabled,
            "fallback_enabled": is_fallback_enabled(),
        },
    }


@app.get("/api/status/{provider}")
async def single_provider_status(
    provider: str,
    provider_prober: ProviderProber = Depends(get_prober),
):
    """Probe one provider."""
    if not is_known_provider(provider):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown provider: {provider}"
        )
    provider_state = await provider_prober.probe(provider)
    return success_response({"provider": provider, "status": provider_state.to_dict()})


# Generation endpoints
@app.post("/api/generate")
async def generate(
    request: GenerateRequest,
    fallback_sequencer: FallbackSequencer = Depends(get_sequencer),
):
    """Generate text with a specific provider or 'auto', falling back on failure."""
    if not request.prompt.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Prompt is required"
        )

    logger.info(f"[Generate] Using provider: {request.provider}, prompt length: {len(request.prompt)}")

    options = GenerationOptions(
        max_tokens=request.max_tokens,
        temperature=request.temperature,
        system_prompt=request.system_prompt,
        timeout=request.timeout,
    )
    try:
        result = await fallback_sequencer.generate(request.provider, request.prompt, options)
    except AllProvidersFailedError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=e.message
        )

    logger.info(f"[Generate] Success in {result.response_time_ms}ms")
    return success_response(result.to_dict())


@app.post("/api/benchmark")
async def benchmark(fallback_sequencer: FallbackSequencer = Depends(get_sequencer)):
    """Run the same prompt through every provider, one at a time, without fallback."""
    results: Dict[str, Dict[str, Any]] = {}
    options = GenerationOptions(max_tokens=BENCHMARK_MAX_TOKENS, temperature=BENCHMARK_TEMPERATURE)

    logger.info("[Benchmark] Testing all providers with standardized prompt")
    for provider_name in fallback_sequencer.priority:
        try:
            result = await fallback_sequencer.generate(
                provider_name, BENCHMARK_PROMPT, options, fallback=False
            )
            results[provider_name] = {
                "success": True,
                "response_time": result.response_time_ms,
                "model": result.model,
                "usage": result.usage,
                "content_length": len(result.content),
                "content": result.content,
            }
        except AllProvidersFailedError as e:
            logger.warning(f"[Benchmark] {provider_name} failed: {e.message}")
            results[provider_name] = {"success": False, "error": e.message}

    return {"timestamp": timestamp(), "prompt": BENCHMARK_PROMPT, "results": results}


@app.get("/api/analytics")
async def analytics(stats: UsageStats = Depends(get_usage_stats)):
    """Usage statistics since the server started."""
    return stats.snapshot().to_dict()


@app.get("/metrics")
async def metrics():
    payload, content_type = render_metrics()
    return Response(content=payload, media_type=content_type)


# Error handlers
@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc):
    """Render HTTP errors in the standard error envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(exc.detail, exc.status_code)
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc):
    """General exception handler."""
    logger.error(f"Unhandled exception: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content=error_response("Internal server error", 500)
    )
