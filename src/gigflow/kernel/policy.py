"""
Workflow Policy - Tunable thresholds and defaults for the workflow engine

Policy values are plain configuration: the engine reads them, nothing in
the engine writes them. Tests pin them explicitly when a boundary matters.
"""

from typing import Literal

from pydantic import BaseModel, Field


class WorkflowPolicy(BaseModel):
    """
    Workflow configuration

    The defaults reproduce the behaviour hosts, businesses and contractors
    already rely on; change them only together with product.
    """

    policy_version: str = Field(
        default="1.0",
        description="Policy version for tracking changes over time",
    )

    # Contractor suspension
    one_star_suspension_threshold: int = Field(
        default=3,
        ge=0,
        description="Suspend once the one-star count is strictly greater than this",
    )

    suspension_reason: str = Field(
        default="Received more than 3 one-star ratings from hosts",
        min_length=1,
        description="Reason recorded on the contractor profile",
    )

    suspension_notice_subject: str = Field(
        default="Account Suspension Notice",
        description="Subject of the message sent to a suspended contractor",
    )

    # New events
    default_stipend_release_method: Literal["notification", "escrow", "prepaid_cards"] = Field(
        default="notification",
        description="Stipend release method when the creator does not choose one",
    )

    # Actor id used as sender for notifications raised by the system itself
    system_actor_id: str = Field(default="system")

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "description": "Thresholds and defaults governing the gig-event workflow"
        },
    }

    def should_suspend(self, one_star_count: int) -> bool:
        """Strict comparison: the (threshold + 1)-th one-star review suspends"""
        return one_star_count > self.one_star_suspension_threshold


default_workflow_policy = WorkflowPolicy()
