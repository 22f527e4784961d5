"""
Strategy selector — resolves a firm identifier to its strategy instance.

Instances are stateless, so one per firm key is cached for the lifetime of
the process. Unknown identifiers resolve to DefaultStrategy (with a single
warning) instead of raising.

Usage:
    strategy = get_strategy("topstep")
    rules = strategy.get_account_rules(50_000, AccountType.EVAL)
"""

from collections.abc import Iterable

from loguru import logger

from src.propfirm.models import PropfirmType
from src.propfirm.strategies.apex import ApexStrategy
from src.propfirm.strategies.bulenox import BulenoxStrategy
from src.propfirm.strategies.default import DefaultStrategy
from src.propfirm.strategies.lucid import LucidStrategy
from src.propfirm.strategies.phidias import PhidiasStrategy
from src.propfirm.strategies.takeprofittrader import TakeProfitTraderStrategy
from src.propfirm.strategies.topstep import TopStepStrategy
from src.propfirm.strategies.tradeify import TradeifyStrategy
from src.propfirm.strategy import PropfirmStrategy

STRATEGIES: dict[PropfirmType, type[PropfirmStrategy]] = {
    PropfirmType.TOPSTEP: TopStepStrategy,
    PropfirmType.TAKEPROFITTRADER: TakeProfitTraderStrategy,
    PropfirmType.APEX: ApexStrategy,
    PropfirmType.BULENOX: BulenoxStrategy,
    PropfirmType.PHIDIAS: PhidiasStrategy,
    PropfirmType.LUCID: LucidStrategy,
    PropfirmType.TRADEIFY: TradeifyStrategy,
}

_cache: dict[str, PropfirmStrategy] = {}


def normalize_firm(firm: PropfirmType | str) -> str:
    """Canonical cache key: enum value or string, stripped and upper-cased."""
    return str(getattr(firm, "value", firm)).strip().upper()


def get_strategy(firm: PropfirmType | str) -> PropfirmStrategy:
    """Cached strategy for a firm identifier, DefaultStrategy when unknown."""
    key = normalize_firm(firm)
    strategy = _cache.get(key)
    if strategy is not None:
        return strategy

    try:
        strategy_cls = STRATEGIES.get(PropfirmType(key))
    except ValueError:
        strategy_cls = None

    if strategy_cls is None:
        logger.warning("Selector: no rules for firm '{}', using Default strategy", firm)
        strategy = DefaultStrategy()
    else:
        strategy = strategy_cls()

    _cache[key] = strategy
    return strategy


def clear_cache() -> None:
    """Forget every cached instance (tests only)."""
    _cache.clear()


def supported_sizes(firm: PropfirmType | str, probe_sizes: Iterable[float]) -> list[float]:
    """Sizes among probe_sizes for which the firm publishes rules."""
    strategy = get_strategy(firm)
    return [size for size in probe_sizes if strategy.get_account_rules(size) is not None]
