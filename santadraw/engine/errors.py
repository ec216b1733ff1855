from __future__ import annotations


class DrawError(RuntimeError):
    pass


class PreconditionFailed(DrawError):
    pass


class InvalidInput(DrawError):
    pass


class DrawInfeasible(DrawError):
    def __init__(self, attempts: int):
        super().__init__(
            f"Could not produce a valid draw after {attempts} attempts. "
            "Reduce the blocks or add more participants."
        )
        self.attempts = attempts
