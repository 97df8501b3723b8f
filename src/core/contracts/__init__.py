"""
Contract Validation Module

Проверка JSON payload, входящих в ядро геймификации.
"""

from .validators import (
    CHALLENGE_DEFINITION,
    LIQUIDITY_ADDED,
    POOL_EVENT_CONTRACTS,
    QUEST_DEFINITION,
    SCHEMA_DIR,
    SWAP_EXECUTED,
    ContractValidator,
    SchemaLoader,
    get_validator,
    validate_challenge_definition,
    validate_contract,
    validate_pool_event,
    validate_quest_definition,
)

__all__ = [
    # Contracts
    "SCHEMA_DIR",
    "CHALLENGE_DEFINITION",
    "QUEST_DEFINITION",
    "LIQUIDITY_ADDED",
    "SWAP_EXECUTED",
    "POOL_EVENT_CONTRACTS",
    # Classes
    "SchemaLoader",
    "ContractValidator",
    # Functions
    "get_validator",
    "validate_contract",
    "validate_challenge_definition",
    "validate_quest_definition",
    "validate_pool_event",
]
