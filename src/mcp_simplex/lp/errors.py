class SolverInvariantError(RuntimeError):
    """
    The pivot loop reached a state that a correct tableau can never be in.

    Raised for an exceeded pivot ceiling, an unbounded ray during phase I, or a basis
    that no longer forms an identity. ``snapshot`` holds the rendered tableau at the
    time of failure.
    """

    def __init__(self, message: str, snapshot: str = "") -> None:
        super().__init__(message)
        self.snapshot = snapshot

    def __str__(self) -> str:
        message = super().__str__()
        if not self.snapshot:
            return message
        return f"{message}\n{self.snapshot}"
