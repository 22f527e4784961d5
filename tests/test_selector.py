"""Tests for the strategy selector: lookup, caching, fallback and size probing."""

import pytest

from src.propfirm import selector
from src.propfirm.models import PropfirmType
from src.propfirm.strategies.default import DefaultStrategy
from src.propfirm.strategies.phidias import PhidiasStrategy
from src.propfirm.strategies.topstep import TopStepStrategy
from src.propfirm.strategy import PropfirmStrategy

PROBE_SIZES = [25_000, 50_000, 75_000, 100_000, 150_000, 250_000, 300_000]


@pytest.fixture(autouse=True)
def _fresh_cache() -> None:
    selector.clear_cache()


class TestGetStrategy:
    def test_resolves_known_firms(self) -> None:
        assert isinstance(selector.get_strategy("TOPSTEP"), TopStepStrategy)
        assert isinstance(selector.get_strategy(PropfirmType.PHIDIAS), PhidiasStrategy)

    def test_identifier_is_case_and_space_insensitive(self) -> None:
        assert selector.get_strategy(" topstep ") is selector.get_strategy("TOPSTEP")

    def test_instances_are_cached(self) -> None:
        assert selector.get_strategy("LUCID") is selector.get_strategy("LUCID")

    def test_clear_cache_builds_new_instance(self) -> None:
        first = selector.get_strategy("APEX")
        selector.clear_cache()
        assert selector.get_strategy("APEX") is not first

    def test_unknown_firm_falls_back_to_default(self) -> None:
        strategy = selector.get_strategy("NOT_A_FIRM")
        assert isinstance(strategy, DefaultStrategy)
        assert strategy.get_account_rules(50_000) is None
        assert strategy.calculate_available_for_withdrawal(50_000, 5000, 0, []) == 0.0
        assert strategy.is_eligible_for_validation(50_000, []) is False

    def test_listed_firm_without_rules_uses_default(self) -> None:
        assert selector.get_strategy(PropfirmType.FTMO).get_name() == "Default"

    @pytest.mark.parametrize("firm", list(selector.STRATEGIES))
    def test_every_strategy_satisfies_protocol(self, firm: PropfirmType) -> None:
        assert isinstance(selector.get_strategy(firm), PropfirmStrategy)


class TestSupportedSizes:
    def test_topstep(self) -> None:
        assert selector.supported_sizes("TOPSTEP", PROBE_SIZES) == [50_000, 100_000, 150_000]

    def test_apex(self) -> None:
        assert selector.supported_sizes("APEX", PROBE_SIZES) == [
            25_000,
            50_000,
            100_000,
            150_000,
            250_000,
            300_000,
        ]

    def test_takeprofittrader_includes_75k(self) -> None:
        assert 75_000 in selector.supported_sizes("TAKEPROFITTRADER", PROBE_SIZES)

    def test_unknown_firm_supports_nothing(self) -> None:
        assert selector.supported_sizes("UNKNOWN", PROBE_SIZES) == []
