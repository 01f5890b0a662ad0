from .program import CompletedProgramWorkout, UserProgram

__all__ = [
    "UserProgram",
    "CompletedProgramWorkout",
]
