from claude_status.transcript.reader import (
    ActiveTool,
    AgentStatus,
    ParsedLog,
    TodoProgress,
    ToolCall,
    TranscriptEntry,
    TranscriptReader,
    active_tools,
    agent_status,
    done_count,
    todo_progress,
)

__all__ = [
    "ActiveTool",
    "AgentStatus",
    "ParsedLog",
    "TodoProgress",
    "ToolCall",
    "TranscriptEntry",
    "TranscriptReader",
    "active_tools",
    "agent_status",
    "done_count",
    "todo_progress",
]
