from app.schemas.common import (
    ApiResponse,
    CamelModel,
    JsonDocument,
    MessageResponse,
    PaginatedResponse,
    PaginationMeta,
)
from app.schemas.execution import (
    ExecutionComplete,
    ExecutionDetailResponse,
    ExecutionResponse,
    ExecutionStart,
    ExecutionSummary,
    TaskOutcome,
)
from app.schemas.integration import (
    FrequencyCount,
    IntegrationBrief,
    IntegrationCreate,
    IntegrationResponse,
    IntegrationStats,
    IntegrationStatusUpdate,
    IntegrationUpdate,
    LastExecution,
    TypeCount,
)
from app.schemas.log_entry import LogEntryCreate, LogEntryResponse, LogLevelDistribution
from app.schemas.task import (
    RetryStrategy,
    TaskCreate,
    TaskOrderItem,
    TaskReorder,
    TaskResponse,
    TaskStatusUpdate,
    TaskUpdate,
)

__all__ = [
    "ApiResponse",
    "CamelModel",
    "ExecutionComplete",
    "ExecutionDetailResponse",
    "ExecutionResponse",
    "ExecutionStart",
    "ExecutionSummary",
    "FrequencyCount",
    "IntegrationBrief",
    "IntegrationCreate",
    "IntegrationResponse",
    "IntegrationStats",
    "IntegrationStatusUpdate",
    "IntegrationUpdate",
    "JsonDocument",
    "LastExecution",
    "LogEntryCreate",
    "LogEntryResponse",
    "LogLevelDistribution",
    "MessageResponse",
    "PaginatedResponse",
    "PaginationMeta",
    "RetryStrategy",
    "TaskCreate",
    "TaskOrderItem",
    "TaskOutcome",
    "TaskReorder",
    "TaskResponse",
    "TaskStatusUpdate",
    "TaskUpdate",
    "TypeCount",
]
