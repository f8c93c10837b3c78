from .utils import ConstraintInfo, build_constraint_info, violation_of

__all__ = ["ConstraintInfo", "build_constraint_info", "violation_of"]
