from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Literal, Optional

TaskKind = Literal["assessment", "chat"]

# Upper bound on a single provider call, per task.
ASSESSMENT_TIMEOUT_S: float = 30.0
CHAT_TIMEOUT_S: float = 20.0

TASK_TIMEOUTS: Dict[str, float] = {
    "assessment": ASSESSMENT_TIMEOUT_S,
    "chat": CHAT_TIMEOUT_S,
}


class AuthMode(str, Enum):
    QUERY_KEY = "query_key"
    BEARER_HEADER = "bearer_header"


@dataclass(frozen=True)
class ProviderConfig:
    endpoint_url: str
    credential: str
    auth_mode: AuthMode

    def __repr__(self) -> str:
        return (
            f"ProviderConfig(endpoint_url={self.endpoint_url!r}, "
            f"credential='***', auth_mode={self.auth_mode.value})"
        )


@dataclass(frozen=True)
class RequestTarget:
    """Final URL and headers for one outbound provider call."""
    url: str
    headers: Dict[str, str]


@dataclass
class PromptRequest:
    task: TaskKind
    primary_text: str              # transcript or chat message
    prompt_id: Optional[str] = None      # assessment only
    session_id: Optional[str] = None     # chat only, passed through
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class DispatchRequest:
    task: TaskKind
    prompt: str
    timeout_s: float
