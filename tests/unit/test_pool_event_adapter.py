"""
Тесты PoolEventAdapter

Проверяет:
- Выделение ноги базового актива из знаковых дельт
- Обновление баллов, метрик и прогрессии на каждое событие
- Всё-или-ничего при сбое оракула и при переполнении баланса или метрики
- Проверку сырых payload и диспетчеризацию
"""

import pytest
from jsonschema import ValidationError

from src.core.domain.events import LiquidityRewarded, PointsCredited, SwapRewarded
from src.core.math.integer_safeguards import UINT256_MAX
from src.core.domain.units import base_units, usd_price
from src.core.errors import InvalidPrice, StalePrice
from src.core.notifications import EventLog
from src.metrics import MetricsTracker
from src.oracle import OracleConfig, PriceOracleAdapter, StaticPriceFeed
from src.pool import PoolEventAdapter, PoolEventConfig
from src.progression import ProgressionEngine
from src.rewards import RewardCalculator

ADMIN = "admin"
ALICE = "0xaaaa"
QUOTE = 2_000 * 10**6


@pytest.fixture
def feed():
    return StaticPriceFeed(price=usd_price(2000), timestamp=1_000)


@pytest.fixture
def event_log():
    return EventLog()


@pytest.fixture
def progression(event_log):
    return ProgressionEngine(admin=ADMIN, event_log=event_log)


@pytest.fixture
def metrics():
    return MetricsTracker()


def make_adapter(feed, progression, metrics, config=None, oracle_config=None, clock=None):
    calculator = RewardCalculator(PriceOracleAdapter(feed, oracle_config, clock=clock))
    return PoolEventAdapter(calculator, progression, metrics, config)


@pytest.fixture
def adapter(feed, progression, metrics):
    return make_adapter(feed, progression, metrics)


class TestPoolEventConfig:
    """Выбор ноги базового актива"""

    def test_default_leg(self):
        assert PoolEventConfig().base_asset_leg == 0

    @pytest.mark.parametrize("leg", [-1, 2])
    def test_invalid_leg(self, leg):
        with pytest.raises(ValueError):
            PoolEventConfig(base_asset_leg=leg)


class TestLiquidityAdded:
    """Награда за добавление ликвидности"""

    def test_reward(self, adapter, progression, metrics, event_log):
        outcome = adapter.on_liquidity_added(ALICE, -base_units(1), -QUOTE)

        assert outcome.base_asset_amount == base_units(1)
        assert outcome.points == 200
        assert outcome.metric_total == base_units(1)
        assert outcome.progression.new_level == 3
        assert progression.get_points(ALICE) == 200
        assert metrics.get_liquidity_provided(ALICE) == base_units(1)
        assert metrics.get_swap_volume(ALICE) == 0
        (event,) = event_log.events(LiquidityRewarded)
        assert event.points == 200

    @pytest.mark.parametrize("amount", [1, 10**15, 123_456_789_012_345_678, base_units(7)])
    def test_points_formula(self, adapter, amount):
        outcome = adapter.on_liquidity_added(ALICE, -amount, 0)
        assert outcome.points == amount * 2000 // (10 * 10**18)

    def test_positive_delta_uses_magnitude(self, adapter):
        assert adapter.on_liquidity_added(ALICE, base_units(1), 0).points == 200

    def test_small_amount_keeps_level(self, adapter, progression):
        outcome = adapter.on_liquidity_added(ALICE, -(10**17), 0)
        assert outcome.points == 20
        assert progression.get_level(ALICE) == 1

    def test_zero_amount(self, adapter, metrics):
        outcome = adapter.on_liquidity_added(ALICE, 0, -QUOTE)
        assert outcome.points == 0
        assert metrics.get_liquidity_provided(ALICE) == 0

    def test_quote_leg(self, feed, progression, metrics):
        adapter = make_adapter(feed, progression, metrics, PoolEventConfig(base_asset_leg=1))
        outcome = adapter.on_liquidity_added(ALICE, -1, -base_units(1))
        assert outcome.base_asset_amount == base_units(1)
        assert outcome.points == 200

    @pytest.mark.parametrize("price", [0, -1])
    def test_invalid_price_leaves_no_state(self, adapter, feed, progression, metrics, event_log, price):
        feed.update_price(price)
        with pytest.raises(InvalidPrice):
            adapter.on_liquidity_added(ALICE, -base_units(1), -QUOTE)

        assert progression.get_points(ALICE) == 0
        assert metrics.get_liquidity_provided(ALICE) == 0
        assert len(event_log) == 0

    def test_stale_price_leaves_no_state(self, feed, progression, metrics):
        adapter = make_adapter(
            feed,
            progression,
            metrics,
            oracle_config=OracleConfig(max_staleness_sec=10),
            clock=lambda: 2_000,
        )
        with pytest.raises(StalePrice):
            adapter.on_liquidity_added(ALICE, -base_units(1), 0)
        assert metrics.get_liquidity_provided(ALICE) == 0

    def test_events_ordered(self, adapter, event_log):
        adapter.on_liquidity_added(ALICE, -base_units(1), 0)
        kinds = [e.kind for e in event_log]
        assert kinds == ["points_credited", "level_up", "liquidity_rewarded"]


class TestSwapExecuted:
    """Награда за своп"""

    def test_reward(self, adapter, progression, metrics, event_log):
        outcome = adapter.on_swap_executed(
            ALICE, True, -base_units(2), -base_units(2), QUOTE * 2
        )
        assert outcome.points == 400
        assert metrics.get_swap_volume(ALICE) == base_units(2)
        assert metrics.get_liquidity_provided(ALICE) == 0
        assert progression.get_points(ALICE) == 400
        (event,) = event_log.events(SwapRewarded)
        assert event.zero_for_one

    def test_reverse_direction_uses_base_leg(self, adapter, metrics):
        outcome = adapter.on_swap_executed(ALICE, False, QUOTE, base_units(1), -QUOTE)
        assert outcome.base_asset_amount == base_units(1)
        assert metrics.get_swap_volume(ALICE) == base_units(1)

    def test_invalid_price_leaves_no_state(self, adapter, feed, metrics, event_log):
        feed.update_price(0)
        with pytest.raises(InvalidPrice):
            adapter.on_swap_executed(ALICE, True, -1, -base_units(1), QUOTE)
        assert metrics.get_swap_volume(ALICE) == 0
        assert event_log.count(PointsCredited) == 0

    def test_non_integer_amount_specified(self, adapter):
        with pytest.raises(ValueError):
            adapter.on_swap_executed(ALICE, True, "1", -1, 1)


class TestHandlePayload:
    """Сырые события пула"""

    def test_liquidity_payload(self, adapter, metrics):
        outcome = adapter.handle_payload(
            {
                "event_type": "liquidity_added",
                "user": ALICE,
                "amount0_delta": -base_units(1),
                "amount1_delta": -QUOTE,
            }
        )
        assert outcome.points == 200
        assert metrics.get_liquidity_provided(ALICE) == base_units(1)

    def test_swap_payload(self, adapter, metrics):
        adapter.handle_payload(
            {
                "event_type": "swap_executed",
                "user": ALICE,
                "zero_for_one": True,
                "amount_specified": -base_units(1),
                "amount0_delta": -base_units(1),
                "amount1_delta": QUOTE,
            }
        )
        assert metrics.get_swap_volume(ALICE) == base_units(1)

    def test_malformed_payload(self, adapter, progression):
        with pytest.raises(ValidationError):
            adapter.handle_payload({"event_type": "liquidity_added", "user": ALICE})
        assert progression.get_points(ALICE) == 0

    def test_unknown_event_type(self, adapter):
        with pytest.raises(ValueError, match="Unknown pool event type"):
            adapter.handle_payload({"event_type": "flash_loan"})


class TestOverflowAtomicity:
    """Переполнение баланса или счётчика не меняет ни то, ни другое"""

    def test_points_overflow_leaves_liquidity_metric(self, adapter, progression, metrics, event_log):
        progression.credit_points(ALICE, UINT256_MAX)
        events_before = len(event_log)

        with pytest.raises(OverflowError):
            adapter.on_liquidity_added(ALICE, -base_units(1), 0)

        assert progression.get_points(ALICE) == UINT256_MAX
        assert metrics.get_liquidity_provided(ALICE) == 0
        assert len(event_log) == events_before

    def test_liquidity_metric_overflow_leaves_points(self, adapter, progression, metrics, event_log):
        metrics.record_liquidity_provision(ALICE, UINT256_MAX)

        with pytest.raises(OverflowError):
            adapter.on_liquidity_added(ALICE, -base_units(1), 0)

        assert progression.get_points(ALICE) == 0
        assert progression.get_level(ALICE) == 1
        assert metrics.get_liquidity_provided(ALICE) == UINT256_MAX
        assert len(event_log) == 0

    def test_points_overflow_leaves_swap_metric(self, adapter, progression, metrics):
        progression.credit_points(ALICE, UINT256_MAX)

        with pytest.raises(OverflowError):
            adapter.on_swap_executed(ALICE, True, -1, -base_units(1), QUOTE)

        assert metrics.get_swap_volume(ALICE) == 0

    def test_swap_metric_overflow_leaves_points(self, adapter, progression, metrics, event_log):
        metrics.record_swap(ALICE, UINT256_MAX)

        with pytest.raises(OverflowError):
            adapter.on_swap_executed(ALICE, True, -1, -base_units(1), QUOTE)

        assert progression.get_points(ALICE) == 0
        assert event_log.count(PointsCredited) == 0

    def test_metric_overflow_with_zero_points(self, adapter, progression, metrics):
        """Сумма без баллов всё равно проверяется по счётчику"""
        metrics.record_liquidity_provision(ALICE, UINT256_MAX)

        with pytest.raises(OverflowError):
            adapter.on_liquidity_added(ALICE, -1, 0)

        assert progression.get_points(ALICE) == 0

    def test_points_credited_before_metric(self, feed, progression):
        """Метрика обновляется, когда баллы уже начислены"""

        class RecordingMetrics(MetricsTracker):
            points_seen = None

            def record_liquidity_provision(self, user, amount):
                self.points_seen = progression.get_points(user)
                return super().record_liquidity_provision(user, amount)

        metrics = RecordingMetrics()
        adapter = make_adapter(feed, progression, metrics)

        adapter.on_liquidity_added(ALICE, -base_units(1), 0)

        assert metrics.points_seen == 200
        assert metrics.get_liquidity_provided(ALICE) == base_units(1)
