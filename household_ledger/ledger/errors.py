"""Engine exceptions. These signal caller bugs, never bad financial data."""


class LedgerError(Exception):
    """Base exception for the calculation engine."""
    pass


class InvalidMonthKeyError(LedgerError, ValueError):
    """Month key is not of the form YYYY-MM."""
    pass


class OrphanGoalTransactionError(LedgerError):
    """Goal transaction references a goal that was not supplied (strict mode)."""

    def __init__(self, transaction_id: str, goal_id: str):
        self.transaction_id = transaction_id
        self.goal_id = goal_id
        super().__init__(
            f"Goal transaction {transaction_id} references unknown goal {goal_id}"
        )
