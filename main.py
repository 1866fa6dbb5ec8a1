"""
viewcall - Example Entry Point
Reads ERC20 metadata and a holder balance for a few tokens in one multicall
"""

import sys
from loguru import logger

from viewcall import ContractConfig, ViewCallError, build_contract, load_settings
from viewcall.log import setup_logging


TOKENS = {
    'USDC': '0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48',
    'WETH': '0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2',
}

HOLDER = '0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045'

ERC20_METHODS = [
    'function symbol()(string)',
    'function decimals()(uint8)',
    'function totalSupply()(uint256)',
    'function balanceOf(address)(uint256)',
]


def main() -> int:
    settings = load_settings()
    setup_logging(settings.log_level, "data/logs/viewcall.log")

    try:
        contract = build_contract(ContractConfig.from_settings(settings, ERC20_METHODS))

        for symbol, token in TOKENS.items():
            contract.add_call(f"{symbol}.symbol", token, 'symbol')
            contract.add_call(f"{symbol}.decimals", token, 'decimals')
            contract.add_call(f"{symbol}.totalSupply", token, 'totalSupply')
            contract.add_call(f"{symbol}.balance", token, 'balanceOf', HOLDER)
    except ViewCallError as e:
        logger.error(f"Setup failed: {e}")
        return 1

    result = contract.call()
    if result.error is not None:
        logger.error(f"Multicall failed: {result.error}")
        return 1

    logger.info(f"Block: {result.block_number}")
    for symbol in TOKENS:
        if f"{symbol}.decimals" not in result.values:
            continue
        decimals = result[f"{symbol}.decimals"][0]
        supply = result.values.get(f"{symbol}.totalSupply", [0])[0]
        balance = result.values.get(f"{symbol}.balance", [0])[0]
        logger.info(
            f"  {symbol}: supply {supply / 10 ** decimals:,.2f}, "
            f"holder balance {balance / 10 ** decimals:,.2f}"
        )

    for name, error in result.errors.items():
        logger.warning(f"  {name}: {error}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
