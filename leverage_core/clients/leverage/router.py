"""Leverage router previews and calldata encoding."""

from __future__ import annotations

from typing import Any, Sequence

from leverage_core.clients.swaps.codec import normalize_address
from leverage_core.models.plan import ActionData
from leverage_core.models.quote import Call, VeloraOffsets
from leverage_core.settings.config import LEVERAGE_ROUTER_ABI


def _call_tuples(calls: Sequence[Call]) -> list[tuple[str, int, bytes]]:
    return [call.as_tuple() for call in calls]


class LeverageRouter:
    def __init__(self, w3, router_address: str) -> None:
        self.w3 = w3
        self.contract = w3.eth.contract(address=normalize_address(router_address), abi=LEVERAGE_ROUTER_ABI)

    @property
    def address(self) -> str:
        return str(self.contract.address)

    def _encode(self, fn_name: str, args: list[Any]) -> str:
        if hasattr(self.contract, "encode_abi"):
            return self.contract.encode_abi(fn_name, args=args)
        return self.contract.encodeABI(fn_name=fn_name, args=args)

    async def preview_deposit(self, token: str, collateral_from_sender: int) -> ActionData:
        result = await self.contract.functions.previewDeposit(
            normalize_address(token),
            int(collateral_from_sender),
        ).call()
        return ActionData.from_result(result)

    def encode_deposit(
        self,
        token: str,
        collateral_from_sender: int,
        flash_loan_amount: int,
        min_shares: int,
        multicall_executor: str,
        calls: Sequence[Call],
    ) -> str:
        return self._encode(
            "deposit",
            [
                normalize_address(token),
                int(collateral_from_sender),
                int(flash_loan_amount),
                int(min_shares),
                normalize_address(multicall_executor),
                _call_tuples(calls),
            ],
        )

    def encode_redeem(
        self,
        token: str,
        shares: int,
        min_collateral_for_sender: int,
        multicall_executor: str,
        calls: Sequence[Call],
    ) -> str:
        return self._encode(
            "redeem",
            [
                normalize_address(token),
                int(shares),
                int(min_collateral_for_sender),
                normalize_address(multicall_executor),
                _call_tuples(calls),
            ],
        )

    def encode_redeem_with_velora(
        self,
        token: str,
        shares: int,
        min_collateral_for_sender: int,
        velora_adapter: str,
        augustus: str,
        offsets: VeloraOffsets,
        swap_data: str | bytes,
    ) -> str:
        if isinstance(swap_data, str):
            swap_data = bytes.fromhex(swap_data.removeprefix("0x"))
        return self._encode(
            "redeemWithVelora",
            [
                normalize_address(token),
                int(shares),
                int(min_collateral_for_sender),
                normalize_address(velora_adapter),
                normalize_address(augustus),
                offsets.as_tuple(),
                swap_data,
            ],
        )
