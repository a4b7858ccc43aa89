class InvariantViolation(Exception):
    """Raised when the generator graph or the program state is malformed.

    These are programming errors, not generation failures: nothing in the
    package catches them.
    """
    pass


def sol_assert(condition: bool, message: str = "") -> None:
    """Abort synthesis with *message* unless *condition* holds."""
    if not condition:
        raise InvariantViolation(message or "generator invariant violated")
