from .pool import ConnectionPool, ConnectionConfigError, PoolClosedError
from .executor import (
    AccessMode, QueryExecutor, QueryFailedError, QueryOperation,
    is_transient_error, to_native
)
from .service import (
    NotFoundError, OperationResult, PickRejectedError, SurvivorService, run_operation
)

__all__ = [
    "ConnectionPool",
    "ConnectionConfigError",
    "PoolClosedError",
    "AccessMode",
    "QueryExecutor",
    "QueryFailedError",
    "QueryOperation",
    "is_transient_error",
    "to_native",
    "NotFoundError",
    "OperationResult",
    "PickRejectedError",
    "SurvivorService",
    "run_operation"
]
