"""Default in-process environment served by the API.

Configuration via environment variables:
- AMMPAIR_FEE_TO_SETTER: account allowed to switch the protocol fee (default: zero address)
- AMMPAIR_DEMO: seed one funded pair on startup (default: false)
- AMMPAIR_FEE_NUMERATOR / AMMPAIR_FEE_DENOMINATOR / AMMPAIR_PROTOCOL_FEE_DIVISOR /
  AMMPAIR_MINIMUM_LIQUIDITY: see PairConfig.from_env
"""

from __future__ import annotations

import os
import time
from functools import lru_cache

import structlog

from ammpair.chain import Chain
from ammpair.config import PairConfig
from ammpair.constants import ZERO_ADDRESS
from ammpair.factory import PairFactory
from ammpair.pair import Pair
from ammpair.tokens import Token

logger = structlog.get_logger()

DEMO_PROVIDER = "0x" + "d0" * 20


def seed_demo_pair(
    factory: PairFactory,
    reserve0: int = 1_000 * 10**18,
    reserve1: int = 2_000 * 10**18,
) -> Pair:
    """Deploy two tokens, create their pair and add initial liquidity."""
    chain = factory.chain
    supply = 10 * max(reserve0, reserve1)
    token_a = Token(chain, DEMO_PROVIDER, supply, name="Demo A", symbol="DMA")
    token_b = Token(chain, DEMO_PROVIDER, supply, name="Demo B", symbol="DMB")
    pair = factory.create_pair(token_a, token_b)
    pair.token0.transfer(DEMO_PROVIDER, pair.address, reserve0)
    pair.token1.transfer(DEMO_PROVIDER, pair.address, reserve1)
    pair.mint(DEMO_PROVIDER)
    logger.info("demo_pair_seeded", pair=pair.address, reserve0=reserve0, reserve1=reserve1)
    return pair


@lru_cache(maxsize=1)
def get_default_factory() -> PairFactory:
    """Create (once) the factory the API serves by default."""
    chain = Chain(timestamp=int(time.time()))
    factory = PairFactory(
        chain,
        fee_to_setter=os.environ.get("AMMPAIR_FEE_TO_SETTER", ZERO_ADDRESS),
        config=PairConfig.from_env(),
    )
    if os.environ.get("AMMPAIR_DEMO", "false").lower() in ("true", "1", "yes"):
        seed_demo_pair(factory)
    else:
        logger.info("demo_pair_disabled", reason="AMMPAIR_DEMO not set")
    return factory
