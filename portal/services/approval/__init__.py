from portal.services.approval.approval_router import RoutingDecision, route
from portal.services.approval.approval_workflow_service import (
    ApprovalWorkflowService,
    BulkActionResult,
)

__all__ = [
    "ApprovalWorkflowService",
    "BulkActionResult",
    "RoutingDecision",
    "route",
]
