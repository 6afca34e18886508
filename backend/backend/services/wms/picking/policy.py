"""Issue type -> resolution policy.

Each reported pick issue is resolved by looking up its policy here and running
the generic executor in ``services.wms.picking.service``. Nothing in this module
touches the database.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from app.db.models.wms.inventory import InventoryStatus
from app.db.models.wms.pick_issue import IssueType
from app.db.models.wms.tasking import TaskPriority


class SubstituteOrder(str, enum.Enum):
    HIGHEST_QUANTITY = "HIGHEST_QUANTITY"
    SOONEST_EXPIRY = "SOONEST_EXPIRY"


@dataclass(frozen=True)
class TaskTemplate:
    title: str
    description: str
    priority: TaskPriority

    def render(self, *, order_id: str, sku: str, bin_id: str) -> tuple[str, str]:
        values = {"order_id": order_id, "sku": sku, "bin_id": bin_id}
        return self.title.format(**values), self.description.format(**values)


@dataclass(frozen=True)
class IssuePolicy:
    inventory_status: InventoryStatus | None = None
    decrement_quantity: bool = False
    task: TaskTemplate | None = None
    # only stock with no expiry date or one not yet passed
    require_fresh: bool = False
    substitute_order: SubstituteOrder = SubstituteOrder.HIGHEST_QUANTITY

    @property
    def mutates_inventory(self) -> bool:
        return self.inventory_status is not None or self.decrement_quantity


ISSUE_POLICIES: dict[IssueType, IssuePolicy] = {
    IssueType.ITEM_DAMAGED: IssuePolicy(
        inventory_status=InventoryStatus.DAMAGED,
        decrement_quantity=True,
    ),
    IssueType.ITEM_MISSING: IssuePolicy(
        task=TaskTemplate(
            title="Bin Audit Required: {bin_id}",
            description="Item {sku} reported as missing in bin {bin_id} for order {order_id}",
            priority=TaskPriority.HIGH,
        ),
    ),
    IssueType.ITEM_EXPIRED: IssuePolicy(
        inventory_status=InventoryStatus.EXPIRED,
        require_fresh=True,
        substitute_order=SubstituteOrder.SOONEST_EXPIRY,
    ),
    IssueType.WRONG_ITEM: IssuePolicy(
        task=TaskTemplate(
            title="Bin Correction Required: {bin_id}",
            description="Wrong item found in bin {bin_id} for order {order_id}. Expected: {sku}",
            priority=TaskPriority.URGENT,
        ),
    ),
}


def parse_issue_type(value: str) -> IssueType | None:
    try:
        return IssueType(value)
    except ValueError:
        return None


def policy_for(issue_type: IssueType) -> IssuePolicy:
    return ISSUE_POLICIES[issue_type]
