"""
Test suite for the pool gamification core

Contains:
- tests/unit/          : Unit tests for individual modules
- tests/scenarios/     : End-to-end scenarios (liquidity progression, quests)
"""
