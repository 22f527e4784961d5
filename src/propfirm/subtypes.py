"""
Account sub-types for firms that sell several products under one name.

The sub-type is an explicit enum resolved once, when an account is created
or imported. detect_sub_type() is the keyword heuristic used for that
resolution: it looks for product names in the free-text account name and
notes (case-insensitive). Strategies accept an explicit sub_type and only
fall back to the heuristic when none is given.

Usage:
    sub_type = detect_sub_type("PHIDIAS", AccountType.FUNDED, "Phidias LIVE #2")
    # → "LIVE"
"""

from enum import Enum
from typing import TypeVar

from src.propfirm.models import AccountType, PropfirmType, is_funded

SubTypeT = TypeVar("SubTypeT", bound=Enum)


class PhidiasSubType(str, Enum):
    EVAL = "EVAL"
    CASH = "CASH"
    LIVE = "LIVE"


class TakeProfitTraderSubType(str, Enum):
    PRO = "PRO"
    PRO_PLUS = "PRO_PLUS"


class LucidSubType(str, Enum):
    FLEX = "FLEX"
    PRO = "PRO"
    DIRECT = "DIRECT"
    LIVE = "LIVE"


class TradeifySubType(str, Enum):
    GROWTH = "GROWTH"
    SELECT = "SELECT"
    LIGHTNING = "LIGHTNING"


class SelectPayoutOption(str, Enum):
    FLEX = "FLEX"
    DAILY = "DAILY"


# ── Keyword Heuristics ──────────────────────────────────────────────────────


def _text(name: str | None, notes: str | None) -> str:
    return f"{name or ''} {notes or ''}".lower()


def detect_phidias_sub_type(
    account_type: AccountType | str | None,
    name: str | None = None,
    notes: str | None = None,
) -> PhidiasSubType:
    """EVAL unless funded; funded is LIVE on "live", otherwise CASH."""
    if not is_funded(account_type):
        return PhidiasSubType.EVAL
    text = _text(name, notes)
    if "live" in text:
        return PhidiasSubType.LIVE
    return PhidiasSubType.CASH


def detect_takeprofittrader_sub_type(
    name: str | None = None, notes: str | None = None
) -> TakeProfitTraderSubType:
    """PRO+ on "pro+" or "live", otherwise the base PRO product."""
    text = _text(name, notes)
    if "pro+" in text or "live" in text:
        return TakeProfitTraderSubType.PRO_PLUS
    return TakeProfitTraderSubType.PRO


def detect_lucid_sub_type(name: str | None = None, notes: str | None = None) -> LucidSubType:
    text = _text(name, notes)
    if "live" in text:
        return LucidSubType.LIVE
    if "direct" in text:
        return LucidSubType.DIRECT
    if "pro" in text:
        return LucidSubType.PRO
    return LucidSubType.FLEX


def detect_tradeify_sub_type(
    name: str | None = None, notes: str | None = None
) -> TradeifySubType:
    text = _text(name, notes)
    if "lightning" in text:
        return TradeifySubType.LIGHTNING
    if "select" in text:
        return TradeifySubType.SELECT
    return TradeifySubType.GROWTH


def detect_select_payout_option(
    name: str | None = None, notes: str | None = None
) -> SelectPayoutOption:
    if "daily" in _text(name, notes):
        return SelectPayoutOption.DAILY
    return SelectPayoutOption.FLEX


def detect_sub_type(
    firm: PropfirmType | str,
    account_type: AccountType | str | None,
    name: str | None = None,
    notes: str | None = None,
) -> str | None:
    """Resolve the stored sub-type of an account, None for single-product firms.

    Tradeify SELECT accounts carry their payout option: "SELECT_FLEX" or
    "SELECT_DAILY".
    """
    firm_key = str(getattr(firm, "value", firm)).strip().upper()
    if firm_key == PropfirmType.PHIDIAS.value:
        return detect_phidias_sub_type(account_type, name, notes).value
    if firm_key == PropfirmType.TAKEPROFITTRADER.value:
        return detect_takeprofittrader_sub_type(name, notes).value
    if firm_key == PropfirmType.LUCID.value:
        return detect_lucid_sub_type(name, notes).value
    if firm_key == PropfirmType.TRADEIFY.value:
        tradeify_type = detect_tradeify_sub_type(name, notes)
        if tradeify_type == TradeifySubType.SELECT:
            return f"SELECT_{detect_select_payout_option(name, notes).value}"
        return tradeify_type.value
    return None


def parse_sub_type(enum_cls: type[SubTypeT], value: str | None) -> SubTypeT | None:
    """Stored sub-type value as enum_cls, None when absent or not a member."""
    if value is None:
        return None
    try:
        return enum_cls(str(getattr(value, "value", value)).strip().upper())
    except ValueError:
        return None
