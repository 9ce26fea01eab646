from abc import ABC, abstractmethod
from pydantic import BaseModel
from typing import Any, Optional
import logging
import time


class AgentStatus:
    IDLE = "idle"
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"


class AgentResult(BaseModel):
    status: str
    output: Any = None
    error: Optional[str] = None
    execution_time_seconds: float = 0.0


class BaseAgent(ABC):
    """
    Abstract base class for the collaborator agents.

    execute() never retries: a failed call is reported once and the caller
    decides what to do with it.
    """

    def __init__(self, name: str, llm_service=None):
        self.name = name
        self.llm = llm_service
        self.logger = logging.getLogger(f"agent.{name}")
        self.status = AgentStatus.IDLE

    async def execute(self, input_data: Any) -> AgentResult:
        """Execute once with timing and logging."""
        start = time.time()
        self.status = AgentStatus.RUNNING

        try:
            self.logger.info(f"[{self.name}] Executing")
            output = await self.run(input_data)
            validated = await self.validate(output)
        except Exception as e:
            self.logger.error(f"[{self.name}] Error: {e}")
            self.status = AgentStatus.FAILED
            return AgentResult(
                status=AgentStatus.FAILED,
                error=str(e),
                execution_time_seconds=time.time() - start,
            )

        self.status = AgentStatus.SUCCESS
        return AgentResult(
            status=AgentStatus.SUCCESS,
            output=validated,
            execution_time_seconds=time.time() - start,
        )

    @abstractmethod
    async def run(self, input_data: Any) -> Any:
        """Core agent logic; must be implemented by subclasses."""
        ...

    async def validate(self, output: Any) -> Any:
        """Optional validation hook. Override for custom validation."""
        return output
