from cms.domain.exceptions import InvariantViolation

__all__ = ["InvariantViolation"]
