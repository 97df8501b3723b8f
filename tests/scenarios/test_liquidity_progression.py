"""
Сценарные тесты: полная сборка при цене базового актива $2000.

Одна единица ликвидности приносит 200 баллов:
    10**18 * 2000e8 // 10**18 // (10 * 10**8) = 200
"""

import pytest

from src.core.domain import Challenge, ChallengeType
from src.core.domain.events import BadgeAwarded, LevelUp
from src.core.domain.units import base_units, usd_price
from src.core.errors import AlreadyCompleted, InvalidPrice
from src.oracle import OracleConfig, StaticPriceFeed
from src.pool import deploy_gamification

ADMIN = "admin"
ALICE = "0xaaaa"
BOB = "0xbbbb"
NOW = 1_700_000_000


@pytest.fixture
def feed():
    return StaticPriceFeed(price=usd_price(2000), timestamp=NOW)


@pytest.fixture
def deployment(feed):
    return deploy_gamification(ADMIN, feed, clock=lambda: NOW)


def add_liquidity(deployment, user, whole_units, times=1):
    for _ in range(times):
        deployment.pool.on_liquidity_added(user, -base_units(whole_units), -2_000 * 10**6)


class TestLiquidityProgression:
    def test_ten_large_additions_reach_first_milestone(self, deployment):
        add_liquidity(deployment, ALICE, 100, times=10)

        assert deployment.progression.get_level(ALICE) >= 10
        assert deployment.progression.has_badge(ALICE, 0)

    def test_twenty_five_additions_reach_second_milestone(self, deployment):
        add_liquidity(deployment, ALICE, 100, times=25)
        assert deployment.progression.get_level(ALICE) >= 25
        assert deployment.progression.has_badge(ALICE, 1)

    def test_max_level(self, deployment):
        add_liquidity(deployment, ALICE, 10_000)
        log = deployment.event_log

        assert deployment.progression.get_level(ALICE) == 100
        assert deployment.progression.badge_ids(ALICE) == [0, 1, 2, 3]
        level_ups = log.count(LevelUp)

        add_liquidity(deployment, ALICE, 10_000)
        assert log.count(LevelUp) == level_ups
        assert log.count(BadgeAwarded) == 4
        assert deployment.progression.get_points(ALICE) == 4_000_000

    def test_tiny_addition_keeps_level(self, deployment):
        add_liquidity(deployment, ALICE, 0)
        deployment.pool.on_liquidity_added(ALICE, -(10**17), 0)
        assert deployment.progression.get_points(ALICE) == 20
        assert deployment.progression.get_level(ALICE) == 1

    def test_milestone_crossed_between_additions(self, deployment):
        add_liquidity(deployment, ALICE, 1, times=4)
        assert deployment.progression.get_level(ALICE) == 9
        assert not deployment.progression.has_badge(ALICE, 0)

        add_liquidity(deployment, ALICE, 1)
        assert deployment.progression.get_level(ALICE) == 11
        assert deployment.progression.has_badge(ALICE, 0)

    def test_level_never_decreases(self, deployment, feed):
        add_liquidity(deployment, ALICE, 5)
        level = deployment.progression.get_level(ALICE)

        feed.update_price(usd_price(1))
        add_liquidity(deployment, ALICE, 1)
        assert deployment.progression.get_level(ALICE) == level

    def test_oracle_outage_is_rejected(self, deployment, feed):
        feed.update_price(0)
        with pytest.raises(InvalidPrice):
            add_liquidity(deployment, ALICE, 1)
        assert deployment.get_user_stats(ALICE).points == 0


class TestChallengeQuestFlow:
    def test_full_flow(self, deployment):
        registry = deployment.registry
        window = dict(start_time=NOW - 10, end_time=NOW + 10)
        liquidity = registry.create_challenge(
            ADMIN,
            Challenge(
                challenge_type=ChallengeType.LIQUIDITY_PROVISION,
                required_amount=base_units(5),
                reward_points=300,
                badge_id=10,
                **window,
            ),
        )
        swapping = registry.create_challenge(
            ADMIN,
            Challenge(
                challenge_type=ChallengeType.SWAPPING,
                required_amount=base_units(1),
                reward_points=300,
                badge_id=11,
                **window,
            ),
        )
        quest = registry.create_quest(ADMIN, "Market Maker", [liquidity, swapping], 1_000, 20)

        add_liquidity(deployment, ALICE, 5)
        deployment.pool.on_swap_executed(
            ALICE, True, -base_units(1), -base_units(1), 2_000 * 10**6
        )
        registry.complete_challenge(ALICE, liquidity)
        registry.complete_challenge(ALICE, swapping)
        result = registry.complete_quest(ALICE, quest)

        stats = deployment.get_user_stats(ALICE)
        assert stats.points == 1_000 + 200 + 300 + 300 + 1_000
        assert stats.level == 29
        assert stats.badge_ids == [0, 1, 10, 11, 20]
        assert stats.liquidity_provided == base_units(5)
        assert stats.swap_volume == base_units(1)
        assert result.progression.badges_awarded == (1, 20)

        with pytest.raises(AlreadyCompleted):
            registry.complete_quest(ALICE, quest)

    def test_users_are_isolated(self, deployment):
        add_liquidity(deployment, ALICE, 100, times=10)
        stats = deployment.get_user_stats(BOB)
        assert (stats.points, stats.level, stats.badges) == (0, 1, 0)


class TestFeedDecimals:
    """Масштаб фида не меняет цену балла"""

    def test_eighteen_decimal_feed(self):
        feed = StaticPriceFeed(price=2000 * 10**18, timestamp=NOW)
        deployment = deploy_gamification(
            ADMIN, feed, clock=lambda: NOW, oracle_config=OracleConfig(decimals=18)
        )

        outcome = deployment.pool.on_liquidity_added(ALICE, -base_units(1), 0)

        assert outcome.points == 200
        stats = deployment.get_user_stats(ALICE)
        assert (stats.points, stats.level, stats.badges) == (200, 3, 0)


class TestAdminPrincipal:
    """Администратор сравнивается в нормализованной форме"""

    def test_mixed_case_admin(self, feed):
        deployment = deploy_gamification("0xADMIN", feed, clock=lambda: NOW)
        challenge_id = deployment.registry.create_challenge(
            " 0xadmin ",
            Challenge(
                challenge_type=ChallengeType.SWAPPING,
                required_amount=base_units(1),
                reward_points=300,
                badge_id=11,
                start_time=NOW - 10,
                end_time=NOW + 10,
            ),
        )

        deployment.pool.on_swap_executed(
            ALICE, True, -base_units(1), -base_units(1), 2_000 * 10**6
        )
        result = deployment.registry.complete_challenge(ALICE, challenge_id)

        assert result.progression.badges_awarded == (11,)
        assert deployment.progression.admin == "0xadmin"
        assert deployment.registry.admin == "0xadmin"
