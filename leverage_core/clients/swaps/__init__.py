"""Swap venue quote adapters."""

from leverage_core.clients.errors import (
    MalformedQuoteError,
    QuoteError,
    QuoteRequestError,
    QuoteTransportError,
    UnsupportedMethodError,
    VenueError,
)
from leverage_core.clients.swaps.factory import SUPPORTED_VENUES, create_quote_adapter
from leverage_core.clients.swaps.lifi import LifiQuoteAdapter
from leverage_core.clients.swaps.pendle import PendleQuoteAdapter
from leverage_core.clients.swaps.slippage import (
    BPS_DENOMINATOR,
    SlippageError,
    apply_slippage_ceiling,
    apply_slippage_floor,
)
from leverage_core.clients.swaps.static import StaticQuoteAdapter, StaticQuoteSnapshot, load_static_quote_snapshot
from leverage_core.clients.swaps.types import QuoteFn
from leverage_core.clients.swaps.uniswap_v2 import UniswapV2QuoteAdapter
from leverage_core.clients.swaps.uniswap_v3 import UniswapV3QuoteAdapter
from leverage_core.clients.swaps.uniswap_v4 import PoolKey, UniswapV4QuoteAdapter, decode_v4_swap
from leverage_core.clients.swaps.velora import (
    VELORA_API_VERSION,
    VELORA_EXACT_OUT_METHODS,
    VELORA_EXACT_OUT_OFFSETS,
    VeloraQuoteAdapter,
)

__all__ = [
    "BPS_DENOMINATOR",
    "SUPPORTED_VENUES",
    "VELORA_API_VERSION",
    "VELORA_EXACT_OUT_METHODS",
    "VELORA_EXACT_OUT_OFFSETS",
    "LifiQuoteAdapter",
    "MalformedQuoteError",
    "PendleQuoteAdapter",
    "PoolKey",
    "QuoteError",
    "QuoteFn",
    "QuoteRequestError",
    "QuoteTransportError",
    "SlippageError",
    "StaticQuoteAdapter",
    "StaticQuoteSnapshot",
    "UniswapV2QuoteAdapter",
    "UniswapV3QuoteAdapter",
    "UniswapV4QuoteAdapter",
    "UnsupportedMethodError",
    "VenueError",
    "VeloraQuoteAdapter",
    "apply_slippage_ceiling",
    "apply_slippage_floor",
    "create_quote_adapter",
    "decode_v4_swap",
    "load_static_quote_snapshot",
]
