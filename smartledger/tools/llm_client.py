"""OpenRouter client for the narrative agents, with cost tracking and JSON decoding."""

from openai import OpenAI
import json
import os
import time
from typing import Optional, Dict, Any, Type, TypeVar
from pydantic import BaseModel, ValidationError
from smartledger.utils.config_loader import load_config, get_agent_profile
from smartledger.utils.metrics import (
    llm_tokens_counter,
    llm_cost_counter,
    llm_api_latency,
    collaborator_calls,
    collaborator_fallbacks
)
from smartledger.utils.errors import CollaboratorError
from smartledger.utils.logging import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# Lazy-initialize OpenRouter client
_client = None

DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"


def get_client(base_url: Optional[str] = None) -> OpenAI:
    """Get or create the OpenRouter client (lazy initialization)"""
    global _client
    if _client is None:
        api_key = os.getenv("OPENROUTER_API_KEY")
        if not api_key:
            raise CollaboratorError("OPENROUTER_API_KEY environment variable is not set")
        _client = OpenAI(api_key=api_key, base_url=base_url or DEFAULT_BASE_URL)
    return _client


def reset_client() -> None:
    """Drop the cached client (e.g. after the API key changes)"""
    global _client
    _client = None


# Pricing per token (input tokens, simplified)
MODEL_PRICING = {
    "anthropic/claude-haiku-4.5": 0.80 / 1_000_000,
    "anthropic/claude-sonnet-4.5": 3.0 / 1_000_000,
    "anthropic/claude-sonnet-4": 3.0 / 1_000_000,
    "openai/gpt-4o-mini": 0.15 / 1_000_000,
}


def calculate_cost(tokens: int, model: str) -> float:
    """
    Calculate cost based on token usage and model pricing.

    Args:
        tokens: Number of tokens used
        model: Model name

    Returns:
        Cost in USD
    """
    price_per_token = MODEL_PRICING.get(model, 0.15 / 1_000_000)
    return tokens * price_per_token


def call_agent(
    message: str,
    agent_id: str,
    context: Optional[Dict[str, Any]] = None,
    config: Optional[Dict[str, Any]] = None
) -> str:
    """
    Send an instruction to a narrative agent and return its raw reply.

    The agent id selects the model and system prompt from the
    `collaborator.agents` config section; DEFAULT_LLM_MODEL, when set,
    replaces the profile model. Attempts are bounded by
    `collaborator.max_attempts` (1 by default).

    Args:
        message: Natural-language instruction
        agent_id: Agent identifier
        context: Structured data appended to the instruction as JSON
        config: Loaded configuration (loaded on demand when omitted)

    Returns:
        Response text

    Raises:
        CollaboratorError: If the call fails or returns no content
    """
    config = config or load_config()
    settings = config.get('collaborator') or {}
    profile = get_agent_profile(config, agent_id)

    # DEFAULT_LLM_MODEL overrides every configured profile
    model = os.getenv("DEFAULT_LLM_MODEL") or profile.get('model') or settings.get('default_model', "anthropic/claude-haiku-4.5")
    max_attempts = max(1, int(settings.get('max_attempts', 1)))
    timeout = settings.get('timeout_seconds', 60)

    messages = []
    if profile.get('system_prompt'):
        messages.append({"role": "system", "content": profile['system_prompt']})
    content = message
    if context is not None:
        content = f"{message}\n\nData:\n{json.dumps(context, default=str)}"
    messages.append({"role": "user", "content": content})

    last_error: Optional[Exception] = None
    for attempt in range(max_attempts):
        try:
            start_time = time.time()

            response = get_client(settings.get('base_url')).chat.completions.create(
                model=model,
                messages=messages,
                timeout=timeout
            )

            latency = time.time() - start_time
            llm_api_latency.labels(model_name=model).observe(latency)

            if response.usage is not None:
                tokens = response.usage.total_tokens
                cost = calculate_cost(tokens, model)
                llm_tokens_counter.labels(model_name=model, agent_id=agent_id).inc(tokens)
                llm_cost_counter.labels(model_name=model).inc(cost)
            else:
                tokens, cost = 0, 0.0

            text = response.choices[0].message.content if response.choices else None
            if not text or not text.strip():
                raise CollaboratorError(f"Agent {agent_id} returned an empty response")

            collaborator_calls.labels(agent_id=agent_id, status='success').inc()
            logger.info(
                "Agent call successful",
                agent_id=agent_id,
                model=model,
                tokens=tokens,
                cost=cost,
                latency=latency
            )
            return text

        except Exception as e:
            last_error = e
            logger.error(f"Agent call failed: {e}", agent_id=agent_id, attempt=attempt + 1)
            if attempt < max_attempts - 1:
                time.sleep(2 ** attempt)

    collaborator_calls.labels(agent_id=agent_id, status='failure').inc()
    if isinstance(last_error, CollaboratorError):
        raise last_error
    raise CollaboratorError(f"Agent {agent_id} call failed after {max_attempts} attempt(s): {last_error}") from last_error


def _strip_code_fences(raw: str) -> str:
    raw = raw.strip()
    if raw.startswith("```"):
        raw = raw.split("\n", 1)[-1]  # drop ```json or ``` line
        raw = raw.rsplit("```", 1)[0]  # drop trailing ```
    return raw.strip()


def parse_agent_json(response: Optional[str], model: Type[ModelT], fallback: ModelT) -> ModelT:
    """
    Decode an agent reply into `model`, or return `fallback`.

    Markdown fences and prose around the outermost JSON object are ignored.

    Args:
        response: Raw agent reply
        model: Expected pydantic shape
        fallback: Value used when the reply cannot be decoded

    Returns:
        Decoded model instance or the fallback
    """
    shape = model.__name__
    if not response:
        collaborator_fallbacks.labels(shape=shape).inc()
        logger.warning("Empty agent response, using fallback", shape=shape)
        return fallback

    raw = _strip_code_fences(response)
    start, end = raw.find("{"), raw.rfind("}")
    if start != -1 and end > start:
        raw = raw[start:end + 1]

    try:
        return model.model_validate(json.loads(raw))
    except (json.JSONDecodeError, ValidationError) as e:
        collaborator_fallbacks.labels(shape=shape).inc()
        logger.warning(f"Failed to decode agent response, using fallback: {e}", shape=shape)
        return fallback
