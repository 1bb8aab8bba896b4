"""API endpoints for inspecting pairs and quoting swaps."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query

from ammpair.factory import PairFactory
from ammpair.library import pair_math
from ammpair.models.api import PairSnapshot, PairSummary, QuoteResponse
from ammpair.models.types import is_valid_address, normalize_address
from ammpair.pair import Pair
from ammpair.sandbox import get_default_factory

logger = structlog.get_logger()

router = APIRouter()


def get_factory() -> PairFactory:
    """Dependency provider for the factory whose pairs are served.

    Override this in tests to inject a populated factory:
        app.dependency_overrides[get_factory] = lambda: factory
    """
    return get_default_factory()


def _find_pair(factory: PairFactory, address: str) -> Pair:
    if not is_valid_address(address):
        raise HTTPException(status_code=400, detail=f"Invalid address: {address}")
    address = normalize_address(address)
    for pair in factory.all_pairs:
        if pair.address == address:
            return pair
    logger.warning("pair_not_found", pair=address)
    raise HTTPException(status_code=404, detail=f"Pair {address} not found")


@router.get("/pairs")
async def list_pairs(factory: PairFactory = Depends(get_factory)) -> list[PairSummary]:
    """All pairs created by the factory, in creation order."""
    return [
        PairSummary(address=p.address, token0=p.token0.address, token1=p.token1.address)
        for p in factory.all_pairs
    ]


@router.get("/pairs/{address}", response_model_by_alias=True)
async def get_pair(address: str, factory: PairFactory = Depends(get_factory)) -> PairSnapshot:
    """Reserves, oracle accumulators and claim supply of one pair."""
    pair = _find_pair(factory, address)
    reserve0, reserve1, block_timestamp_last = pair.get_reserves()
    return PairSnapshot(
        address=pair.address,
        token0=pair.token0.address,
        token1=pair.token1.address,
        reserve0=reserve0,
        reserve1=reserve1,
        block_timestamp_last=block_timestamp_last,
        price0_cumulative_last=pair.price0_cumulative_last,
        price1_cumulative_last=pair.price1_cumulative_last,
        k_last=pair.k_last,
        total_supply=pair.total_supply,
    )


@router.get("/pairs/{address}/quote", response_model_by_alias=True)
async def quote(
    address: str,
    token_in: str = Query(alias="tokenIn"),
    amount_in: int = Query(alias="amountIn", ge=0),
    factory: PairFactory = Depends(get_factory),
) -> QuoteResponse:
    """Output of an exact-input swap against the pair's current reserves.

    Error Handling:
        - Unknown pair: 404
        - Token not in pair: 400
    """
    pair = _find_pair(factory, address)
    try:
        result = pair_math.simulate_swap(pair, token_in, amount_in)
    except ValueError as err:
        raise HTTPException(status_code=400, detail=str(err)) from err

    logger.info(
        "quote_served",
        pair=pair.address,
        token_in=result.token_in,
        amount_in=result.amount_in,
        amount_out=result.amount_out,
    )
    return QuoteResponse(
        pair=pair.address,
        token_in=result.token_in,
        token_out=result.token_out,
        amount_in=result.amount_in,
        amount_out=result.amount_out,
    )
