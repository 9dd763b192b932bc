"""Venue selection: build a quote adapter from a chain entry and a venue name."""

from __future__ import annotations

from typing import Any

from leverage_core.clients.swaps.lifi import LifiQuoteAdapter
from leverage_core.clients.swaps.pendle import PendleQuoteAdapter
from leverage_core.clients.swaps.types import QuoteFn
from leverage_core.clients.swaps.uniswap_v2 import UniswapV2QuoteAdapter
from leverage_core.clients.swaps.uniswap_v3 import UniswapV3QuoteAdapter
from leverage_core.clients.swaps.uniswap_v4 import UniswapV4QuoteAdapter
from leverage_core.clients.swaps.velora import VeloraQuoteAdapter
from leverage_core.logging import log
from leverage_core.models.chain import ChainConfig

SUPPORTED_VENUES = ("uniswap_v2", "uniswap_v3", "uniswap_v4", "velora", "lifi", "pendle")


def _require(value: str | None, name: str, chain: ChainConfig) -> str:
    if not value:
        raise ValueError(f"Missing {name} for chain={chain.name}")
    return value


def create_quote_adapter(
    venue: str,
    chain_config: ChainConfig,
    *,
    w3=None,
    slippage_bps: int = 50,
    executor: str | None = None,
    **options: Any,
) -> QuoteFn:
    """Return the adapter for ``venue``.

    Swaps run inside the leverage router, so on-chain venues send output to the
    router and HTTP venues quote with the multicall executor as sender.
    """
    venue = venue.strip().lower()
    router = _require(chain_config.leverage_router, "leverage_router", chain_config)
    from_address = executor or chain_config.multicall_executor

    if venue == "velora":
        adapter = VeloraQuoteAdapter(
            router=router,
            chain_id=chain_config.chain_id,
            from_address=from_address,
            slippage_bps=slippage_bps,
            **options,
        )
    elif venue == "lifi":
        adapter = LifiQuoteAdapter(
            router=router,
            chain_id=chain_config.chain_id,
            from_address=from_address,
            slippage_bps=slippage_bps,
            **options,
        )
    elif venue == "pendle":
        adapter = PendleQuoteAdapter(
            router=router,
            chain_id=chain_config.chain_id,
            slippage_bps=slippage_bps,
            **options,
        )
    elif venue in ("uniswap_v2", "uniswap_v3", "uniswap_v4"):
        if w3 is None:
            raise ValueError(f"{venue} adapter requires a web3 instance")
        if venue == "uniswap_v2":
            adapter = UniswapV2QuoteAdapter(
                w3,
                router=_require(
                    options.pop("router", None) or chain_config.uniswap_v2_router,
                    "uniswap_v2_router",
                    chain_config,
                ),
                recipient=router,
                wrapped_native=chain_config.weth,
                slippage_bps=slippage_bps,
                **options,
            )
        elif venue == "uniswap_v3":
            quoter = options.pop("quoter", None) or chain_config.uniswap_v3_quoter
            adapter = UniswapV3QuoteAdapter(
                w3,
                router=_require(
                    options.pop("router", None) or chain_config.uniswap_v3_swap_router,
                    "uniswap_v3_swap_router",
                    chain_config,
                ),
                recipient=router,
                quoter=quoter,
                wrapped_native=chain_config.weth,
                slippage_bps=slippage_bps,
                **options,
            )
        else:
            if "pool_key" not in options:
                raise ValueError("uniswap_v4 adapter requires pool_key")
            adapter = UniswapV4QuoteAdapter(
                w3,
                quoter=_require(
                    options.pop("quoter", None) or chain_config.uniswap_v4_quoter,
                    "uniswap_v4_quoter",
                    chain_config,
                ),
                universal_router=_require(
                    options.pop("universal_router", None) or chain_config.universal_router,
                    "universal_router",
                    chain_config,
                ),
                slippage_bps=slippage_bps,
                **options,
            )
    else:
        raise ValueError(f"Unsupported venue '{venue}'. Expected one of {', '.join(SUPPORTED_VENUES)}")

    log.info(f"Using quote adapter venue={venue} chain={chain_config.name} router={router}")
    return adapter
