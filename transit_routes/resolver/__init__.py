from .relationships import RelationshipResolver

__all__ = ["RelationshipResolver"]
