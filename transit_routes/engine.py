#!/usr/bin/env python3
"""
Route Planning Engine

Turns a resolved configuration snapshot into one routing plan.

Steps (strictly in this order, edges injected by one step are
normalized before the next reads them):
1. Pass 1 - mirror dynamic relationships
2. Pass 2 - mirror default relationships
3. Normalize
4. Hub Phase A - static, default and blackhole routes
5. Normalize again
6. Hub Phase B - associations and inspection routes
7. Subnet routes
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .diagnostic_logger import DiagnosticLogger
from .errors import RoutePlanningError
from .metrics import METRICS
from .models import EntitySet
from .planner.actions import SubnetRoute
from .planner.hub_routes import HubAction, HubRoutePlanner
from .planner.subnet_routes import SubnetRoutePlanner
from .resolver.relationships import RelationshipResolver

logger = logging.getLogger(__name__)


@dataclass
class RoutingPlan:
    """Result of one planning run."""

    hub: str
    hub_actions: List[HubAction] = field(default_factory=list)
    subnet_actions: List[SubnetRoute] = field(default_factory=list)
    diagnostics: Dict[str, Any] = field(default_factory=dict)
    duration_ms: float = 0

    @property
    def actions(self) -> List[Any]:
        return list(self.hub_actions) + list(self.subnet_actions)

    def action_ids(self) -> List[str]:
        return [action.action_id for action in self.actions]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hub": self.hub,
            "hub_actions": [action.to_dict() for action in self.hub_actions],
            "subnet_actions": [action.to_dict() for action in self.subnet_actions],
            "diagnostics": self.diagnostics,
            "duration_ms": self.duration_ms,
        }


class RoutePlanningEngine:
    """
    Computes desired-state routing for an entity set.

    One-shot and synchronous: the entity set is mutated in place and must be
    rebuilt from configuration for every run.
    """

    def plan(
        self, entities: EntitySet, diagnostics: Optional[DiagnosticLogger] = None
    ) -> RoutingPlan:
        start_time = time.time()
        diagnostics = diagnostics or DiagnosticLogger()
        METRICS["entities_total"].set(len(entities))

        try:
            resolver = RelationshipResolver(entities, diagnostics)
            resolver.configure_relationships()

            hub_actions = HubRoutePlanner(entities, resolver).plan()

            subnet_actions = SubnetRoutePlanner(entities, diagnostics).plan()
        except RoutePlanningError as e:
            METRICS["planning_failures"].labels(error=type(e).__name__).inc()
            diagnostics.log_error(str(e), e.to_dict())
            raise

        duration_ms = (time.time() - start_time) * 1000
        plan = RoutingPlan(
            hub=entities.hub,
            hub_actions=hub_actions,
            subnet_actions=subnet_actions,
            diagnostics=diagnostics.generate_report(),
            duration_ms=duration_ms,
        )

        METRICS["planning_latency"].observe(duration_ms)
        for action in plan.actions:
            METRICS["plan_actions"].labels(action_type=action.action_type).inc()

        diagnostics.log_success(
            f"Planned {len(hub_actions)} hub actions and {len(subnet_actions)} "
            f"subnet routes for {len(entities)} entities in {duration_ms:.1f}ms"
        )
        return plan


def plan_routes(entities: EntitySet) -> RoutingPlan:
    return RoutePlanningEngine().plan(entities)
