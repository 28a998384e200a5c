"""Core types shared by the catalog, selector, adapters and router.

Descriptors are frozen dataclasses defined once at process start. Requests
and responses are plain dataclasses; the HTTP layer has its own pydantic
schemas and converts at the boundary.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum


class ProviderName(StrEnum):
    """Closed set of providers with an executable adapter."""

    GROQ = "groq"
    GEMINI = "gemini"
    AIMLAPI = "aimlapi"


class TaskType(StrEnum):
    """Coarse workload categories used to filter eligible models."""

    CHAT = "chat"
    VISION = "vision"
    CODE = "code"
    REASONING = "reasoning"
    EMBEDDING = "embedding"
    AUDIO = "audio"
    GENERAL = "general"


class PriorityMode(StrEnum):
    """Caller's optimization goal for candidate ordering."""

    SPEED = "speed"
    COST = "cost"
    QUALITY = "quality"
    BALANCED = "balanced"


class MessageRole(StrEnum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class CostRates:
    """USD per million tokens."""

    input: float
    output: float

    @property
    def combined(self) -> float:
        return self.input + self.output


@dataclass(frozen=True)
class RateLimits:
    requests_per_minute: int
    tokens_per_minute: int


@dataclass(frozen=True)
class ModelCapabilities:
    streaming: bool = False
    functions: bool = False
    vision: bool = False
    audio: bool = False


@dataclass(frozen=True)
class ModelDescriptor:
    """Static description of one routable model.

    Attributes:
        id: Provider-side model identifier, unique within the catalog
        name: Display name
        provider: Adapter that executes this model
        task_types: Task types this model may serve
        context_window: Context size in tokens
        cost_per_million: Input/output USD rates
        rate_limit: Provider-declared request and token limits
        capabilities: Feature flags
        priority: Rank, lower is tried first in speed/balanced mode
    """

    id: str
    name: str
    provider: ProviderName
    task_types: frozenset[TaskType]
    context_window: int
    cost_per_million: CostRates
    rate_limit: RateLimits
    capabilities: ModelCapabilities
    priority: int

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("model id cannot be empty")
        if self.context_window < 1:
            raise ValueError("context_window must be positive")
        if self.cost_per_million.input < 0 or self.cost_per_million.output < 0:
            raise ValueError("cost rates cannot be negative")

    def supports(self, task_type: TaskType) -> bool:
        return task_type in self.task_types


@dataclass(frozen=True)
class ChatMessage:
    role: MessageRole
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role.value, "content": self.content}


@dataclass
class ModelRequest:
    """A caller's request for a text completion.

    Exactly one of ``prompt``/``messages`` is used. When both are supplied the
    messages win; a bare prompt is sent as a single user message.
    """

    prompt: str | None = None
    messages: list[ChatMessage] | None = None
    task_type: TaskType | None = None
    priority: PriorityMode | None = None
    max_tokens: int | None = None
    temperature: float | None = None
    stream: bool = False
    fallback_enabled: bool = True
    max_cost_per_request: float | None = None

    def __post_init__(self) -> None:
        if not self.messages and not self.prompt:
            raise ValueError("Either prompt or messages is required")
        if self.max_tokens is not None and self.max_tokens < 1:
            raise ValueError("max_tokens must be positive")
        if self.max_cost_per_request is not None and self.max_cost_per_request < 0:
            raise ValueError("max_cost_per_request cannot be negative")

    def normalized_messages(self) -> list[ChatMessage]:
        if self.messages:
            return list(self.messages)
        return [ChatMessage(role=MessageRole.USER, content=self.prompt or "")]


@dataclass(frozen=True)
class RequestOptions:
    """Generation options forwarded to an adapter."""

    max_tokens: int | None = None
    temperature: float | None = None
    stream: bool = False


@dataclass(frozen=True)
class TokenUsage:
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "prompt_tokens": self.prompt_tokens,
            "completion_tokens": self.completion_tokens,
            "total_tokens": self.total_tokens,
        }


@dataclass(frozen=True)
class ExecutionResult:
    """Normalized adapter output.

    ``usage_estimated`` is True when the provider did not report usage and the
    adapter approximated it from text length.
    """

    content: str
    usage: TokenUsage
    usage_estimated: bool = False


@dataclass
class ModelResponse:
    content: str
    model: str
    provider: ProviderName
    usage: TokenUsage
    cost: float
    latency_ms: float
    fallback_used: bool
    attempted_models: list[str] = field(default_factory=list)


@dataclass
class ModelHealth:
    """Liveness heuristic for one provider+model pair."""

    provider: ProviderName
    model: str
    is_healthy: bool = True
    last_checked: datetime | None = None
    failure_count: int = 0
    average_latency_ms: float = 0.0
    rate_limit_hit: bool = False
    rate_limit_reset_at: datetime | None = None
    total_successes: int = 0
    total_failures: int = 0

    @property
    def key(self) -> str:
        return f"{self.provider.value}:{self.model}"

    @property
    def success_rate(self) -> float:
        attempts = self.total_successes + self.total_failures
        if attempts == 0:
            return 0.0
        return self.total_successes / attempts
