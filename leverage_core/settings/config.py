"""
Configuration management for leverage-token planning.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Optional

from dotenv import load_dotenv
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from leverage_core.models.chain import (
    CHAIN_KEY_BY_ID,
    LEVERAGE_CHAIN_CONFIGS,
    ChainConfig,
)

PROJECT_ROOT = Path(__file__).resolve().parents[2]


# Load environment variables from .env file if it exists
env_file = Path(".env")
if env_file.exists():
    load_dotenv(env_file, override=False)  # Don't override existing env vars
else:
    load_dotenv(PROJECT_ROOT / ".env", override=False)

CHAIN_CONFIGS: dict[str, ChainConfig] = LEVERAGE_CHAIN_CONFIGS
CHAIN_BY_ID: dict[int, str] = dict(CHAIN_KEY_BY_ID)
BASE_MAINNET: ChainConfig = CHAIN_CONFIGS["base"]


def get_chain_config(chain: str | int | None) -> ChainConfig | None:
    """Return chain configuration by chain name or chain id."""
    if chain is None:
        return None
    if isinstance(chain, int):
        chain_key = CHAIN_BY_ID.get(chain)
        return CHAIN_CONFIGS.get(chain_key) if chain_key else None
    return CHAIN_CONFIGS.get(chain.strip().lower())


ERC20_ABI: list[dict[str, Any]] = [
    {
        "inputs": [
            {"internalType": "address", "name": "spender", "type": "address"},
            {"internalType": "uint256", "name": "amount", "type": "uint256"},
        ],
        "name": "approve",
        "outputs": [{"internalType": "bool", "name": "", "type": "bool"}],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "inputs": [
            {"internalType": "address", "name": "owner", "type": "address"},
            {"internalType": "address", "name": "spender", "type": "address"},
        ],
        "name": "allowance",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "decimals",
        "outputs": [{"internalType": "uint8", "name": "", "type": "uint8"}],
        "stateMutability": "view",
        "type": "function",
    },
]

WETH_ABI: list[dict[str, Any]] = [
    {
        "inputs": [{"internalType": "uint256", "name": "wad", "type": "uint256"}],
        "name": "withdraw",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "deposit",
        "outputs": [],
        "stateMutability": "payable",
        "type": "function",
    },
]

UNISWAP_V2_ROUTER_ABI: list[dict[str, Any]] = [
    {
        "inputs": [],
        "name": "factory",
        "outputs": [{"internalType": "address", "name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [
            {"internalType": "uint256", "name": "amountIn", "type": "uint256"},
            {"internalType": "uint256", "name": "amountOutMin", "type": "uint256"},
            {"internalType": "address[]", "name": "path", "type": "address[]"},
            {"internalType": "address", "name": "to", "type": "address"},
            {"internalType": "uint256", "name": "deadline", "type": "uint256"},
        ],
        "name": "swapExactTokensForTokens",
        "outputs": [{"internalType": "uint256[]", "name": "amounts", "type": "uint256[]"}],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "inputs": [
            {"internalType": "uint256", "name": "amountOutMin", "type": "uint256"},
            {"internalType": "address[]", "name": "path", "type": "address[]"},
            {"internalType": "address", "name": "to", "type": "address"},
            {"internalType": "uint256", "name": "deadline", "type": "uint256"},
        ],
        "name": "swapExactETHForTokens",
        "outputs": [{"internalType": "uint256[]", "name": "amounts", "type": "uint256[]"}],
        "stateMutability": "payable",
        "type": "function",
    },
    {
        "inputs": [
            {"internalType": "uint256", "name": "amountOut", "type": "uint256"},
            {"internalType": "uint256", "name": "amountInMax", "type": "uint256"},
            {"internalType": "address[]", "name": "path", "type": "address[]"},
            {"internalType": "address", "name": "to", "type": "address"},
            {"internalType": "uint256", "name": "deadline", "type": "uint256"},
        ],
        "name": "swapTokensForExactTokens",
        "outputs": [{"internalType": "uint256[]", "name": "amounts", "type": "uint256[]"}],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "inputs": [
            {"internalType": "uint256", "name": "amountOut", "type": "uint256"},
            {"internalType": "address[]", "name": "path", "type": "address[]"},
            {"internalType": "address", "name": "to", "type": "address"},
            {"internalType": "uint256", "name": "deadline", "type": "uint256"},
        ],
        "name": "swapETHForExactTokens",
        "outputs": [{"internalType": "uint256[]", "name": "amounts", "type": "uint256[]"}],
        "stateMutability": "payable",
        "type": "function",
    },
]

UNISWAP_V2_FACTORY_ABI: list[dict[str, Any]] = [
    {
        "inputs": [
            {"internalType": "address", "name": "tokenA", "type": "address"},
            {"internalType": "address", "name": "tokenB", "type": "address"},
        ],
        "name": "getPair",
        "outputs": [{"internalType": "address", "name": "pair", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    }
]

UNISWAP_V2_PAIR_ABI: list[dict[str, Any]] = [
    {
        "inputs": [],
        "name": "getReserves",
        "outputs": [
            {"internalType": "uint112", "name": "reserve0", "type": "uint112"},
            {"internalType": "uint112", "name": "reserve1", "type": "uint112"},
            {"internalType": "uint32", "name": "blockTimestampLast", "type": "uint32"},
        ],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "token0",
        "outputs": [{"internalType": "address", "name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    },
]

_V3_QUOTE_EXACT_INPUT_PARAMS = {
    "components": [
        {"internalType": "address", "name": "tokenIn", "type": "address"},
        {"internalType": "address", "name": "tokenOut", "type": "address"},
        {"internalType": "uint256", "name": "amountIn", "type": "uint256"},
        {"internalType": "uint24", "name": "fee", "type": "uint24"},
        {"internalType": "uint160", "name": "sqrtPriceLimitX96", "type": "uint160"},
    ],
    "internalType": "struct IQuoterV2.QuoteExactInputSingleParams",
    "name": "params",
    "type": "tuple",
}

_V3_QUOTE_EXACT_OUTPUT_PARAMS = {
    "components": [
        {"internalType": "address", "name": "tokenIn", "type": "address"},
        {"internalType": "address", "name": "tokenOut", "type": "address"},
        {"internalType": "uint256", "name": "amount", "type": "uint256"},
        {"internalType": "uint24", "name": "fee", "type": "uint24"},
        {"internalType": "uint160", "name": "sqrtPriceLimitX96", "type": "uint160"},
    ],
    "internalType": "struct IQuoterV2.QuoteExactOutputSingleParams",
    "name": "params",
    "type": "tuple",
}

V3_QUOTER_V2_ABI: list[dict[str, Any]] = [
    {
        "inputs": [_V3_QUOTE_EXACT_INPUT_PARAMS],
        "name": "quoteExactInputSingle",
        "outputs": [
            {"internalType": "uint256", "name": "amountOut", "type": "uint256"},
            {"internalType": "uint160", "name": "sqrtPriceX96After", "type": "uint160"},
            {"internalType": "uint32", "name": "initializedTicksCrossed", "type": "uint32"},
            {"internalType": "uint256", "name": "gasEstimate", "type": "uint256"},
        ],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "inputs": [_V3_QUOTE_EXACT_OUTPUT_PARAMS],
        "name": "quoteExactOutputSingle",
        "outputs": [
            {"internalType": "uint256", "name": "amountIn", "type": "uint256"},
            {"internalType": "uint160", "name": "sqrtPriceX96After", "type": "uint160"},
            {"internalType": "uint32", "name": "initializedTicksCrossed", "type": "uint32"},
            {"internalType": "uint256", "name": "gasEstimate", "type": "uint256"},
        ],
        "stateMutability": "nonpayable",
        "type": "function",
    },
]

V3_SWAP_ROUTER02_ABI: list[dict[str, Any]] = [
    {
        "inputs": [
            {
                "components": [
                    {"internalType": "address", "name": "tokenIn", "type": "address"},
                    {"internalType": "address", "name": "tokenOut", "type": "address"},
                    {"internalType": "uint24", "name": "fee", "type": "uint24"},
                    {"internalType": "address", "name": "recipient", "type": "address"},
                    {"internalType": "uint256", "name": "amountIn", "type": "uint256"},
                    {"internalType": "uint256", "name": "amountOutMinimum", "type": "uint256"},
                    {"internalType": "uint160", "name": "sqrtPriceLimitX96", "type": "uint160"},
                ],
                "internalType": "struct IV3SwapRouter.ExactInputSingleParams",
                "name": "params",
                "type": "tuple",
            }
        ],
        "name": "exactInputSingle",
        "outputs": [{"internalType": "uint256", "name": "amountOut", "type": "uint256"}],
        "stateMutability": "payable",
        "type": "function",
    },
    {
        "inputs": [
            {
                "components": [
                    {"internalType": "address", "name": "tokenIn", "type": "address"},
                    {"internalType": "address", "name": "tokenOut", "type": "address"},
                    {"internalType": "uint24", "name": "fee", "type": "uint24"},
                    {"internalType": "address", "name": "recipient", "type": "address"},
                    {"internalType": "uint256", "name": "amountOut", "type": "uint256"},
                    {"internalType": "uint256", "name": "amountInMaximum", "type": "uint256"},
                    {"internalType": "uint160", "name": "sqrtPriceLimitX96", "type": "uint160"},
                ],
                "internalType": "struct IV3SwapRouter.ExactOutputSingleParams",
                "name": "params",
                "type": "tuple",
            }
        ],
        "name": "exactOutputSingle",
        "outputs": [{"internalType": "uint256", "name": "amountIn", "type": "uint256"}],
        "stateMutability": "payable",
        "type": "function",
    },
]

# Original SwapRouter (deadline inside the params struct)
V3_SWAP_ROUTER_ABI: list[dict[str, Any]] = [
    {
        "inputs": [
            {
                "components": [
                    {"internalType": "address", "name": "tokenIn", "type": "address"},
                    {"internalType": "address", "name": "tokenOut", "type": "address"},
                    {"internalType": "uint24", "name": "fee", "type": "uint24"},
                    {"internalType": "address", "name": "recipient", "type": "address"},
                    {"internalType": "uint256", "name": "deadline", "type": "uint256"},
                    {"internalType": "uint256", "name": "amountIn", "type": "uint256"},
                    {"internalType": "uint256", "name": "amountOutMinimum", "type": "uint256"},
                    {"internalType": "uint160", "name": "sqrtPriceLimitX96", "type": "uint160"},
                ],
                "internalType": "struct ISwapRouter.ExactInputSingleParams",
                "name": "params",
                "type": "tuple",
            }
        ],
        "name": "exactInputSingle",
        "outputs": [{"internalType": "uint256", "name": "amountOut", "type": "uint256"}],
        "stateMutability": "payable",
        "type": "function",
    },
    {
        "inputs": [
            {
                "components": [
                    {"internalType": "address", "name": "tokenIn", "type": "address"},
                    {"internalType": "address", "name": "tokenOut", "type": "address"},
                    {"internalType": "uint24", "name": "fee", "type": "uint24"},
                    {"internalType": "address", "name": "recipient", "type": "address"},
                    {"internalType": "uint256", "name": "deadline", "type": "uint256"},
                    {"internalType": "uint256", "name": "amountOut", "type": "uint256"},
                    {"internalType": "uint256", "name": "amountInMaximum", "type": "uint256"},
                    {"internalType": "uint160", "name": "sqrtPriceLimitX96", "type": "uint160"},
                ],
                "internalType": "struct ISwapRouter.ExactOutputSingleParams",
                "name": "params",
                "type": "tuple",
            }
        ],
        "name": "exactOutputSingle",
        "outputs": [{"internalType": "uint256", "name": "amountIn", "type": "uint256"}],
        "stateMutability": "payable",
        "type": "function",
    },
]

V3_POOL_SLOT0_ABI: list[dict[str, Any]] = [
    {
        "inputs": [],
        "name": "slot0",
        "outputs": [
            {"internalType": "uint160", "name": "sqrtPriceX96", "type": "uint160"},
            {"internalType": "int24", "name": "tick", "type": "int24"},
            {"internalType": "uint16", "name": "observationIndex", "type": "uint16"},
            {"internalType": "uint16", "name": "observationCardinality", "type": "uint16"},
            {"internalType": "uint16", "name": "observationCardinalityNext", "type": "uint16"},
            {"internalType": "uint8", "name": "feeProtocol", "type": "uint8"},
            {"internalType": "bool", "name": "unlocked", "type": "bool"},
        ],
        "stateMutability": "view",
        "type": "function",
    }
]

_V4_POOL_KEY = {
    "components": [
        {"internalType": "Currency", "name": "currency0", "type": "address"},
        {"internalType": "Currency", "name": "currency1", "type": "address"},
        {"internalType": "uint24", "name": "fee", "type": "uint24"},
        {"internalType": "int24", "name": "tickSpacing", "type": "int24"},
        {"internalType": "contract IHooks", "name": "hooks", "type": "address"},
    ],
    "internalType": "struct PoolKey",
    "name": "poolKey",
    "type": "tuple",
}

_V4_QUOTE_PARAMS = {
    "components": [
        _V4_POOL_KEY,
        {"internalType": "bool", "name": "zeroForOne", "type": "bool"},
        {"internalType": "uint128", "name": "exactAmount", "type": "uint128"},
        {"internalType": "bytes", "name": "hookData", "type": "bytes"},
    ],
    "internalType": "struct IV4Quoter.QuoteExactSingleParams",
    "name": "params",
    "type": "tuple",
}

V4_QUOTER_ABI: list[dict[str, Any]] = [
    {
        "inputs": [_V4_QUOTE_PARAMS],
        "name": "quoteExactInputSingle",
        "outputs": [
            {"internalType": "uint256", "name": "amountOut", "type": "uint256"},
            {"internalType": "uint256", "name": "gasEstimate", "type": "uint256"},
        ],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "inputs": [_V4_QUOTE_PARAMS],
        "name": "quoteExactOutputSingle",
        "outputs": [
            {"internalType": "uint256", "name": "amountIn", "type": "uint256"},
            {"internalType": "uint256", "name": "gasEstimate", "type": "uint256"},
        ],
        "stateMutability": "nonpayable",
        "type": "function",
    },
]

UNIVERSAL_ROUTER_EXECUTE_ABI: list[dict[str, Any]] = [
    {
        "inputs": [
            {"internalType": "bytes", "name": "commands", "type": "bytes"},
            {"internalType": "bytes[]", "name": "inputs", "type": "bytes[]"},
            {"internalType": "uint256", "name": "deadline", "type": "uint256"},
        ],
        "name": "execute",
        "outputs": [],
        "stateMutability": "payable",
        "type": "function",
    },
]

_ACTION_DATA_OUTPUT = {
    "components": [
        {"internalType": "uint256", "name": "collateral", "type": "uint256"},
        {"internalType": "uint256", "name": "debt", "type": "uint256"},
        {"internalType": "uint256", "name": "shares", "type": "uint256"},
        {"internalType": "uint256", "name": "tokenFee", "type": "uint256"},
        {"internalType": "uint256", "name": "treasuryFee", "type": "uint256"},
    ],
    "internalType": "struct ActionData",
    "name": "previewData",
    "type": "tuple",
}

LEVERAGE_MANAGER_ABI: list[dict[str, Any]] = [
    {
        "inputs": [{"internalType": "contract ILeverageToken", "name": "token", "type": "address"}],
        "name": "getLeverageTokenCollateralAsset",
        "outputs": [{"internalType": "contract IERC20", "name": "collateralAsset", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [{"internalType": "contract ILeverageToken", "name": "token", "type": "address"}],
        "name": "getLeverageTokenDebtAsset",
        "outputs": [{"internalType": "contract IERC20", "name": "debtAsset", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [{"internalType": "contract ILeverageToken", "name": "token", "type": "address"}],
        "name": "getLeverageTokenState",
        "outputs": [
            {
                "components": [
                    {"internalType": "uint256", "name": "collateralInDebtAsset", "type": "uint256"},
                    {"internalType": "uint256", "name": "debt", "type": "uint256"},
                    {"internalType": "uint256", "name": "equity", "type": "uint256"},
                    {"internalType": "uint256", "name": "collateralRatio", "type": "uint256"},
                ],
                "internalType": "struct LeverageTokenState",
                "name": "state",
                "type": "tuple",
            }
        ],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [
            {"internalType": "contract ILeverageToken", "name": "token", "type": "address"},
            {"internalType": "uint256", "name": "collateral", "type": "uint256"},
        ],
        "name": "previewDeposit",
        "outputs": [_ACTION_DATA_OUTPUT],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [
            {"internalType": "contract ILeverageToken", "name": "token", "type": "address"},
            {"internalType": "uint256", "name": "shares", "type": "uint256"},
        ],
        "name": "previewRedeem",
        "outputs": [_ACTION_DATA_OUTPUT],
        "stateMutability": "view",
        "type": "function",
    },
]

_CALLS_INPUT = {
    "components": [
        {"internalType": "address", "name": "target", "type": "address"},
        {"internalType": "uint256", "name": "value", "type": "uint256"},
        {"internalType": "bytes", "name": "data", "type": "bytes"},
    ],
    "internalType": "struct IMulticallExecutor.Call[]",
    "name": "swapCalls",
    "type": "tuple[]",
}

LEVERAGE_ROUTER_ABI: list[dict[str, Any]] = [
    {
        "inputs": [
            {"internalType": "contract ILeverageToken", "name": "token", "type": "address"},
            {"internalType": "uint256", "name": "collateralFromSender", "type": "uint256"},
        ],
        "name": "previewDeposit",
        "outputs": [_ACTION_DATA_OUTPUT],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [
            {"internalType": "contract ILeverageToken", "name": "leverageToken", "type": "address"},
            {"internalType": "uint256", "name": "collateralFromSender", "type": "uint256"},
            {"internalType": "uint256", "name": "flashLoanAmount", "type": "uint256"},
            {"internalType": "uint256", "name": "minShares", "type": "uint256"},
            {"internalType": "contract IMulticallExecutor", "name": "multicallExecutor", "type": "address"},
            _CALLS_INPUT,
        ],
        "name": "deposit",
        "outputs": [],
        "stateMutability": "payable",
        "type": "function",
    },
    {
        "inputs": [
            {"internalType": "contract ILeverageToken", "name": "token", "type": "address"},
            {"internalType": "uint256", "name": "shares", "type": "uint256"},
            {"internalType": "uint256", "name": "minCollateralForSender", "type": "uint256"},
            {"internalType": "contract IMulticallExecutor", "name": "multicallExecutor", "type": "address"},
            _CALLS_INPUT,
        ],
        "name": "redeem",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "inputs": [
            {"internalType": "contract ILeverageToken", "name": "token", "type": "address"},
            {"internalType": "uint256", "name": "shares", "type": "uint256"},
            {"internalType": "uint256", "name": "minCollateralForSender", "type": "uint256"},
            {"internalType": "contract IVeloraAdapter", "name": "veloraAdapter", "type": "address"},
            {"internalType": "address", "name": "augustus", "type": "address"},
            {
                "components": [
                    {"internalType": "uint256", "name": "exactAmount", "type": "uint256"},
                    {"internalType": "uint256", "name": "limitAmount", "type": "uint256"},
                    {"internalType": "uint256", "name": "quotedAmount", "type": "uint256"},
                ],
                "internalType": "struct IVeloraAdapter.Offsets",
                "name": "offsets",
                "type": "tuple",
            },
            {"internalType": "bytes", "name": "swapData", "type": "bytes"},
        ],
        "name": "redeemWithVelora",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        extra="ignore",
        env_ignore_empty=True,
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
    )

    app_name: str = "Leverage Core"
    environment: str = Field(default="development", validation_alias="ENVIRONMENT")

    # Redis Configuration (log sink only)
    redis_host: str = Field(default="localhost", validation_alias="REDIS_HOST")
    redis_port: int = Field(default=6379, validation_alias="REDIS_PORT")
    redis_db: int = Field(default=0, validation_alias="REDIS_DB")

    # Chain / wallet
    rpc_url: str = Field(
        default="https://mainnet.base.org",
        validation_alias=AliasChoices("RPC_URL", "ETH_RPC_URL"),
    )
    chain: str = Field(default="base", validation_alias="CHAIN")
    private_key: Optional[str] = Field(default=None, validation_alias="PRIVATE_KEY")

    # Deployment overrides (take precedence over the chain registry)
    leverage_manager_address: Optional[str] = Field(default=None, validation_alias="LEVERAGE_MANAGER_ADDRESS")
    leverage_router_address: Optional[str] = Field(default=None, validation_alias="LEVERAGE_ROUTER_ADDRESS")
    multicall_executor_address: Optional[str] = Field(default=None, validation_alias="MULTICALL_EXECUTOR_ADDRESS")
    velora_adapter_address: Optional[str] = Field(default=None, validation_alias="VELORA_ADAPTER_ADDRESS")

    # Quoting
    default_slippage_bps: int = Field(default=50, ge=0, le=10_000, validation_alias="DEFAULT_SLIPPAGE_BPS")
    deadline_seconds: int = Field(default=15 * 60, validation_alias="SWAP_DEADLINE_SECONDS")
    http_timeout: float = Field(default=15.0, validation_alias="HTTP_TIMEOUT_SECONDS")
    velora_base_url: str = Field(default="https://api.paraswap.io", validation_alias="VELORA_BASE_URL")
    lifi_base_url: str = Field(default="https://li.quest", validation_alias="LIFI_BASE_URL")
    pendle_base_url: str = Field(default="https://api-v2.pendle.finance/core", validation_alias="PENDLE_BASE_URL")
    lifi_api_key: Optional[str] = Field(default=None, validation_alias="LIFI_API_KEY")
    lifi_integrator: Optional[str] = Field(default=None, validation_alias="LIFI_INTEGRATOR")
    lifi_order: Literal["CHEAPEST", "FASTEST"] = Field(default="CHEAPEST", validation_alias="LIFI_ORDER")

    # Logging
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: str = Field(default="logs/leverage_core.log", validation_alias="LOG_FILE")
    log_redis_enabled: bool = Field(default=False, validation_alias="LOG_REDIS_ENABLED")
    log_redis_list_key: str = Field(default="logs:leverage", validation_alias="LOG_REDIS_LIST_KEY")
    log_redis_max_entries: int = Field(default=1000, validation_alias="LOG_REDIS_MAX_ENTRIES")

    @property
    def redis_url(self) -> str:
        """Construct Redis URL."""
        return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"


def resolve_chain_config(app_settings: Settings, chain: str | int | None = None) -> ChainConfig:
    """Return the registry entry for ``chain`` with settings-level address overrides applied."""
    target = chain if chain is not None else app_settings.chain
    chain_config = get_chain_config(target)
    if chain_config is None:
        raise ValueError(f"Unsupported chain '{target}'")

    overrides = {
        "leverage_manager": app_settings.leverage_manager_address,
        "leverage_router": app_settings.leverage_router_address,
        "multicall_executor": app_settings.multicall_executor_address,
        "velora_adapter": app_settings.velora_adapter_address,
    }
    update = {key: value for key, value in overrides.items() if value}
    if not update:
        return chain_config
    # model_copy does not run validators
    return ChainConfig(**{**chain_config.model_dump(), **update})


# Global settings instance
settings = Settings()
