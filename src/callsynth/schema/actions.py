"""Action models recorded on bot turns.

An action is a discrete side-effecting step the bot takes within a turn:
calling a tool, receiving its output, writing to conversation memory, or
handing the caller off to a human agent. Order within a turn matters; a
tool call precedes its matching output.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


MEMORY_TOOL_NAME = "conversation_memory"


class ToolCall(BaseModel):
    """A request sent to a backend tool."""
    model_config = ConfigDict(frozen=True)

    type: Literal["tool_call"] = "tool_call"
    tool_name: str = Field(description="Name of the tool being called")
    request: dict[str, Any] = Field(
        default_factory=dict,
        description="Request payload sent to the tool"
    )


class ToolOutput(BaseModel):
    """The response returned by a backend tool."""
    model_config = ConfigDict(frozen=True)

    type: Literal["tool_output"] = "tool_output"
    tool_name: str = Field(description="Name of the tool that responded")
    response: dict[str, Any] = Field(
        default_factory=dict,
        description="Response payload returned by the tool"
    )


class PersistentStorage(BaseModel):
    """A write to cross-turn conversation memory."""
    model_config = ConfigDict(frozen=True)

    type: Literal["persistent_storage"] = "persistent_storage"
    tool_name: Literal["conversation_memory"] = MEMORY_TOOL_NAME
    response: dict[str, Any] = Field(
        default_factory=dict,
        description="Key/value written to memory"
    )


class AgentInvocation(BaseModel):
    """A handoff to a human or specialist agent."""
    model_config = ConfigDict(frozen=True)

    type: Literal["agent_invocation"] = "agent_invocation"
    description: str = Field(default="", description="Who the call was handed to")


Action = Annotated[
    Union[ToolCall, ToolOutput, PersistentStorage, AgentInvocation],
    Field(discriminator="type")
]
