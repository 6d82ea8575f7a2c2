class RouletteError(Exception):
    """Base class for every rejected table operation."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidAmount(RouletteError):
    def __init__(self, amount: float):
        super().__init__(f"Amount must be positive, got {amount}")
        self.amount = amount


class InsufficientFunds(RouletteError):
    def __init__(self, amount: float, balance: float):
        super().__init__(f"Insufficient funds: {amount} requested, {balance} available")
        self.amount = amount
        self.balance = balance


class InvalidRigNumber(RouletteError):
    def __init__(self, number):
        super().__init__(f"Invalid rig number: {number!r}")
        self.number = number


class InvalidBetShape(RouletteError):
    def __init__(self, kind: str, numbers, reason: str = ""):
        detail = f" ({reason})" if reason else ""
        super().__init__(f"Invalid {kind} bet: {list(numbers or [])}{detail}")
        self.kind = kind
        self.numbers = numbers


class BetNotFound(RouletteError):
    def __init__(self, bet_id: str):
        super().__init__(f"Bet not found: {bet_id}")
        self.bet_id = bet_id


class BetAlreadySettled(RouletteError):
    def __init__(self, bet_id: str, outcome):
        super().__init__(f"Bet {bet_id} is already {outcome}")
        self.bet_id = bet_id
        self.outcome = outcome


class InvalidRigColor(RouletteError):
    def __init__(self, color):
        super().__init__(f"Invalid rig color: {color!r}")
        self.color = color
