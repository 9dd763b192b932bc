"""Read-only access to the leverage manager contract."""

from __future__ import annotations

from leverage_core.clients.swaps.codec import normalize_address
from leverage_core.models.plan import ActionData, LeverageTokenState
from leverage_core.settings.config import LEVERAGE_MANAGER_ABI


class LeverageManagerReader:
    """Token configuration and previews. Reverts propagate unchanged to the caller."""

    def __init__(self, w3, manager_address: str) -> None:
        self.w3 = w3
        self.address = normalize_address(manager_address)
        self.contract = w3.eth.contract(address=self.address, abi=LEVERAGE_MANAGER_ABI)

    async def get_collateral_asset(self, token: str) -> str:
        asset = await self.contract.functions.getLeverageTokenCollateralAsset(normalize_address(token)).call()
        return normalize_address(asset)

    async def get_debt_asset(self, token: str) -> str:
        asset = await self.contract.functions.getLeverageTokenDebtAsset(normalize_address(token)).call()
        return normalize_address(asset)

    async def get_state(self, token: str) -> LeverageTokenState:
        result = await self.contract.functions.getLeverageTokenState(normalize_address(token)).call()
        return LeverageTokenState.from_result(result)

    async def preview_deposit(self, token: str, collateral: int) -> ActionData:
        result = await self.contract.functions.previewDeposit(normalize_address(token), int(collateral)).call()
        return ActionData.from_result(result)

    async def preview_redeem(self, token: str, shares: int) -> ActionData:
        result = await self.contract.functions.previewRedeem(normalize_address(token), int(shares)).call()
        return ActionData.from_result(result)
