"""
Account aggregate as handed to the rule engine by its callers.

The engine never owns accounts: persistence, imports and UI live elsewhere.
This model is the snapshot those collaborators pass in, plus the YAML loader
used by the CLI. The product sub-type is resolved once, at construction,
from the name/notes keywords when the snapshot does not carry one.

Usage:
    account = load_account("config/accounts/topstep_50k_eval.yaml")
    account.current_balance
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, model_validator

from src.propfirm import ledger
from src.propfirm.models import AccountType, PnlEntry, WithdrawalEntry
from src.propfirm.subtypes import detect_sub_type


class Account(BaseModel):
    """One propfirm account with its PnL and withdrawal history."""

    name: str
    firm: str = Field(description="Firm identifier, e.g. TOPSTEP or PHIDIAS")
    size: float = Field(gt=0, description="Initial balance")
    account_type: AccountType = AccountType.EVAL
    notes: str | None = None
    sub_type: str | None = Field(
        default=None, description="Stored product sub-type, inferred from name/notes when absent"
    )
    pnl_entries: list[PnlEntry] = []
    withdrawals: list[WithdrawalEntry] = []

    @model_validator(mode="after")
    def _resolve_sub_type(self) -> "Account":
        if self.sub_type is None:
            self.sub_type = detect_sub_type(self.firm, self.account_type, self.name, self.notes)
        return self

    @property
    def total_pnl(self) -> float:
        return ledger.total_pnl(self.pnl_entries)

    @property
    def total_withdrawals(self) -> float:
        return sum(withdrawal.amount for withdrawal in self.withdrawals)

    @property
    def current_balance(self) -> float:
        return ledger.current_balance(self.size, self.total_pnl, self.total_withdrawals)

    @property
    def peak_balance(self) -> float:
        """Highest balance reached, withdrawals included, never below the initial balance."""
        path = ledger.account_balance_path(self.size, self.pnl_entries, self.withdrawals)
        if not path:
            return self.size
        return path[-1].peak


def load_account(path: str | Path) -> Account:
    """Load an account snapshot from YAML.

    Raises:
        FileNotFoundError: if path does not exist.
        pydantic.ValidationError: if the document does not describe an account.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Account file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data: dict[str, Any] = yaml.safe_load(f) or {}

    return Account(**data)
