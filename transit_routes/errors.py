# File: transit_routes/errors.py
"""
Planning errors.

Every error here is fatal for a planning run: hub routing is globally
consistent, so a partially applied plan leaves asymmetric paths behind.
"""

from typing import Optional


class RoutePlanningError(Exception):
    """Base class for configurations the engine refuses to plan."""

    def __init__(
        self,
        message: str,
        entity: Optional[str] = None,
        target: Optional[str] = None,
        inspector: Optional[str] = None,
    ):
        super().__init__(message)
        self.entity = entity
        self.target = target
        self.inspector = inspector

    def to_dict(self):
        return {
            "error": type(self).__name__,
            "message": str(self),
            "entity": self.entity,
            "target": self.target,
            "inspector": self.inspector,
        }


class UnknownEntityError(RoutePlanningError):
    def __init__(self, name: str, referenced_by: Optional[str] = None):
        message = f"Unknown entity '{name}'"
        if referenced_by:
            message += f" referenced by '{referenced_by}'"
        super().__init__(message, entity=referenced_by, target=name)


class InvalidEntityError(RoutePlanningError):
    pass


class InspectorNotCapableError(RoutePlanningError):
    def __init__(self, entity: str, target: str, inspector: str):
        super().__init__(
            f"{entity} expects inspection by {inspector} for traffic to {target} "
            f"but {inspector} does not advertise inspection capabilities.",
            entity=entity,
            target=target,
            inspector=inspector,
        )


class UnsupportedInspectionError(RoutePlanningError):
    pass


class AmbiguousInspectionError(RoutePlanningError):
    def __init__(self, entity: str, target: str, inspectors):
        names = ", ".join(sorted(inspectors))
        super().__init__(
            f"{entity} routes to {target} through more than one inspector ({names}). "
            "Declare a single inspector for this pair.",
            entity=entity,
            target=target,
            inspector=names,
        )
