from .plan_renderer import PlanRenderer, get_plan_renderer

__all__ = ["PlanRenderer", "get_plan_renderer"]
