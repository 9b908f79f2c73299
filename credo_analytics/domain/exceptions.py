"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class DuplicateLoanError(DomainException):
    """Candidate loan reuses the id of a loan already in the portfolio"""

    def __init__(self, loan_id: str):
        super().__init__(f"Loan {loan_id!r} already exists in the portfolio")
        self.loan_id = loan_id


class InvalidScoreRangeError(DomainException):
    """Score range has its bounds reversed"""

    pass
