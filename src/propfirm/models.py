"""
Rule contracts and ledger entries shared by every propfirm strategy.

AccountRules describes one firm/tier's evaluation thresholds, WithdrawalRules
describes how a funded account may be paid out. Both are frozen so a strategy
can hand out its static table instances without copying them.

Usage:
    rules = AccountRules(profit_target=3000, max_drawdown=2000, daily_loss_limit=2000)
    entry = PnlEntry(date=date(2026, 3, 2), amount=450.0)
"""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# ── Enumerations ────────────────────────────────────────────────────────────


class AccountType(str, Enum):
    """Lifecycle phase of a propfirm account."""

    EVAL = "EVAL"
    FUNDED = "FUNDED"


class PropfirmType(str, Enum):
    """Known firm identifiers. Anything else resolves to the default strategy."""

    TOPSTEP = "TOPSTEP"
    TAKEPROFITTRADER = "TAKEPROFITTRADER"
    APEX = "APEX"
    BULENOX = "BULENOX"
    PHIDIAS = "PHIDIAS"
    LUCID = "LUCID"
    TRADEIFY = "TRADEIFY"
    FTMO = "FTMO"
    MYFUNDEDFUTURES = "MYFUNDEDFUTURES"
    OTHER = "OTHER"


class DrawdownStyle(str, Enum):
    """How a firm measures drawdown."""

    TRAILING = "TRAILING"
    END_OF_DAY = "END_OF_DAY"
    STATIC = "STATIC"
    FLOORED = "FLOORED"


# ── Rule Contracts ──────────────────────────────────────────────────────────


class MaxContracts(BaseModel):
    """Position size ceiling for one tier."""

    model_config = ConfigDict(frozen=True)

    mini: int
    micro: int


class AccountRules(BaseModel):
    """Evaluation thresholds for one (firm, account size) tier."""

    model_config = ConfigDict(frozen=True)

    profit_target: float = Field(description="Net profit required to graduate")
    max_drawdown: float = Field(description="Maximum loss allowed from the drawdown reference")
    daily_loss_limit: float = Field(default=0.0, description="Max loss for one day, 0 = none")
    consistency_rule: float = Field(
        default=0.0, description="Max share (%) of total profit one day may represent, 0 = none"
    )
    min_trading_days: int = 0
    max_contracts: MaxContracts | None = None

    def for_funded(self, keep_consistency: bool = False) -> "AccountRules":
        """Copy with the evaluation-only fields zeroed (graduation already happened)."""
        update: dict[str, float | int] = {"profit_target": 0.0, "min_trading_days": 0}
        if not keep_consistency:
            update["consistency_rule"] = 0.0
        return self.model_copy(update=update)


class DrawdownMeasure(BaseModel):
    """Drawdown flavour of one firm/product. lock_amount only applies to FLOORED."""

    model_config = ConfigDict(frozen=True)

    style: DrawdownStyle = DrawdownStyle.TRAILING
    lock_amount: float = 0.0


class CycleRequirements(BaseModel):
    """Run of qualifying days required before a payout unlocks."""

    model_config = ConfigDict(frozen=True)

    days_per_cycle: int
    min_daily_profit: float
    withdrawal_percentage: float = Field(description="Fraction of profit unlocked (0.5 = 50%)")


class WithdrawalRules(BaseModel):
    """Payout policy of a funded account."""

    model_config = ConfigDict(frozen=True)

    tax_rate: float = Field(ge=0.0, le=1.0, description="Fraction withheld by the firm")
    requires_cycles: bool = False
    cycle_requirements: CycleRequirements | None = None
    has_buffer: bool = False
    min_withdrawal: float | None = None
    max_withdrawal: float | None = None
    frequency: str | None = None

    @classmethod
    def not_applicable(cls, tax_rate: float = 0.0) -> "WithdrawalRules":
        """Rule set handed to EVAL accounts: no cycles, no buffer."""
        return cls(tax_rate=tax_rate, requires_cycles=False, has_buffer=False)


# ── Ledger Entries ──────────────────────────────────────────────────────────


class PnlEntry(BaseModel):
    """One realized daily profit/loss record."""

    model_config = ConfigDict(frozen=True)

    date: datetime | date
    amount: float

    @property
    def day(self) -> date:
        """Calendar day the entry belongs to."""
        if isinstance(self.date, datetime):
            return self.date.date()
        return self.date


class WithdrawalEntry(BaseModel):
    """One payout taken from a funded account."""

    model_config = ConfigDict(frozen=True)

    date: datetime | date
    amount: float = Field(ge=0.0)


def is_funded(account_type: AccountType | str | None) -> bool:
    """True for FUNDED, tolerant of plain strings and None."""
    if account_type is None:
        return False
    return str(getattr(account_type, "value", account_type)).strip().upper() == "FUNDED"
