# File: transit_routes/api/rest_api_server.py
#!/usr/bin/env python3
"""
Route Planning REST API Server

FastAPI-based REST API in front of the planning engine.
Implements:
- Plans (JSON topology in, routing plan out)
- Plan reports (plain text)
- Health and Prometheus metrics
"""

import logging
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import PlainTextResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel, ConfigDict, Field

from ..engine import RoutePlanningEngine, RoutingPlan
from ..errors import RoutePlanningError
from ..metrics import METRICS
from ..report.plan_renderer import get_plan_renderer
from ..topology import load_topology

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Transit Routes - Route Planning API",
    description="Computes hub and subnet routing plans for hub-and-spoke topologies",
    version="1.0.0",
)


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SubnetSpec(CamelModel):
    name: str = Field(..., min_length=1)
    role: str
    cidr: str
    route_table: str = Field(..., alias="routeTable")
    availability_zone: str = Field("", alias="availabilityZone")


class EntitySpec(CamelModel):
    style: str
    attachment: str
    route_table: str = Field(..., alias="routeTable")
    cidr: Optional[str] = None
    inspects: Optional[bool] = None
    subnets: List[SubnetSpec] = Field(default_factory=list)


class RouteSpec(CamelModel):
    vpc_name: str = Field(..., alias="vpcName")
    routes_to: str = Field(..., alias="routesTo")
    inspected_by: Optional[str] = Field(None, alias="inspectedBy")


class StaticRouteSpec(RouteSpec):
    static_cidr: str = Field(..., alias="staticCidr")


class BlackholeRouteSpec(CamelModel):
    vpc_name: str = Field(..., alias="vpcName")
    blackhole_cidrs: List[str] = Field(default_factory=list, alias="blackholeCidrs")


class RoutesSpec(CamelModel):
    default_routes: List[RouteSpec] = Field(default_factory=list, alias="defaultRoutes")
    dynamic_routes: List[RouteSpec] = Field(default_factory=list, alias="dynamicRoutes")
    static_routes: List[StaticRouteSpec] = Field(default_factory=list, alias="staticRoutes")
    blackhole_routes: List[BlackholeRouteSpec] = Field(
        default_factory=list, alias="blackholeRoutes"
    )


class TopologyRequest(CamelModel):
    hub: str = Field(..., min_length=1)
    entities: Dict[str, EntitySpec] = Field(default_factory=dict)
    routes: RoutesSpec = Field(default_factory=RoutesSpec)


def build_plan(topology: TopologyRequest) -> RoutingPlan:
    document = topology.model_dump(by_alias=True, exclude_none=True)
    try:
        return RoutePlanningEngine().plan(load_topology(document))
    except RoutePlanningError as e:
        logger.warning(f"Rejected topology for hub {topology.hub}: {e}")
        raise HTTPException(status_code=422, detail=e.to_dict())


@app.get("/health")
def health():
    return {"status": "healthy"}


@app.get("/metrics")
def metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.middleware("http")
async def prometheus_middleware(request: Request, call_next):
    METRICS["api_requests"].labels(method=request.method, endpoint=request.url.path).inc()
    return await call_next(request)


@app.post("/plans")
def create_plan(topology: TopologyRequest):
    return build_plan(topology).to_dict()


@app.post("/plans/report", response_class=PlainTextResponse)
def create_plan_report(topology: TopologyRequest):
    return get_plan_renderer().render(build_plan(topology))
