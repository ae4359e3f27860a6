from .actions import HubAssociation, HubRoute, HubRouteStyle, SubnetRoute
from .hub_routes import HubRoutePlanner
from .subnet_routes import SubnetRoutePlanner

__all__ = [
    "HubAssociation",
    "HubRoute",
    "HubRouteStyle",
    "HubRoutePlanner",
    "SubnetRoute",
    "SubnetRoutePlanner",
]
