"""Forward and backward passes of the critical path method."""

from .backward_pass import BackwardPass, compute_latest
from .forward_pass import ForwardPass, compute_earliest

__all__ = ["BackwardPass", "ForwardPass", "compute_earliest", "compute_latest"]
