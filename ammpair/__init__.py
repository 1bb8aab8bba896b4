"""Constant product AMM pair core - Python Implementation."""

from ammpair.chain import Chain
from ammpair.config import DEFAULT_PAIR_CONFIG, PairConfig
from ammpair.factory import PairFactory
from ammpair.pair import Pair
from ammpair.tokens import Token

__version__ = "0.1.0"
__all__ = [
    "Chain",
    "Pair",
    "PairConfig",
    "PairFactory",
    "Token",
    "DEFAULT_PAIR_CONFIG",
    "__version__",
]
