#!/usr/bin/env python3
"""
Plan Report Renderer

Renders a routing plan as a plain-text report, one block per hub route
table followed by the subnet routes that point back at the hub.
"""

from collections import OrderedDict
from typing import Any, Dict, List, Optional

from jinja2 import Template

from ..engine import RoutingPlan
from ..planner.actions import HubAssociation

PLAN_REPORT_TEMPLATE = """\
Routing plan for hub {{ hub }}
{{ "=" * (21 + hub|length) }}
{% for table in tables %}
{{ table.entity }} (hub route table {{ table.route_table }})
{% for route in table.routes %}
  {{ "%-20s"|format(route.destination_cidr) }} {% if route.blackhole %}blackhole{% else %}-> {{ route.attachment }}{% endif %}  [{{ route.style }}{% if route.target %} {{ route.target }}{% endif %}]
{% endfor %}
{% for association in table.associations %}
  propagate {{ association.target }} ({{ association.attachment }})
{% endfor %}
{% endfor %}
{% if subnet_routes %}
Subnet routes
-------------
{% for route in subnet_routes %}
  {{ route.entity }}/{{ route.subnet }}{% if route.availability_zone %} {{ route.availability_zone }}{% endif %} {{ route.route_table }}: {{ route.destination_cidr }} -> {{ route.hub }}
{% endfor %}
{% endif %}
{% if events %}
Resolution notes
----------------
{% for event in events %}
  {{ event.event }}: {% for key, value in event.context|dictsort %}{{ key }}={{ value }}{% if not loop.last %} {% endif %}{% endfor %}

{% endfor %}
{% endif %}
"""


class PlanRenderer:
    def __init__(self):
        self.template = Template(PLAN_REPORT_TEMPLATE, trim_blocks=True, lstrip_blocks=True)

    def tables(self, plan: RoutingPlan) -> List[Dict[str, Any]]:
        """Group hub actions per route table, in plan order."""
        tables: Dict[str, Dict[str, Any]] = OrderedDict()
        for action in plan.hub_actions:
            table = tables.setdefault(
                action.route_table,
                {
                    "entity": action.entity,
                    "route_table": action.route_table,
                    "routes": [],
                    "associations": [],
                },
            )
            if isinstance(action, HubAssociation):
                table["associations"].append(action.to_dict())
            else:
                table["routes"].append(action.to_dict())
        return list(tables.values())

    def render(self, plan: RoutingPlan) -> str:
        return self.template.render(
            hub=plan.hub,
            tables=self.tables(plan),
            subnet_routes=[action.to_dict() for action in plan.subnet_actions],
            events=plan.diagnostics.get("events", []),
        )


_renderer: Optional[PlanRenderer] = None


def get_plan_renderer() -> PlanRenderer:
    global _renderer
    if _renderer is None:
        _renderer = PlanRenderer()
    return _renderer
