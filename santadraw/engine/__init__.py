from .constraints import ExclusionSet, check_pairs
from .errors import DrawError, DrawInfeasible, InvalidInput, PreconditionFailed
from .orchestrator import DrawConfig, DrawResult, Strategy, run_draw, select_strategy

__all__ = [
    "DrawConfig",
    "DrawError",
    "DrawInfeasible",
    "DrawResult",
    "ExclusionSet",
    "InvalidInput",
    "PreconditionFailed",
    "Strategy",
    "check_pairs",
    "run_draw",
    "select_strategy",
]
