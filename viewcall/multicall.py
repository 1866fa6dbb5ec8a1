"""
Multicall Utility
Batch multiple contract calls into a single RPC request against a
Multicall2/Multicall3 aggregator contract
"""

from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple, Union

from web3 import Web3
from loguru import logger

from .exceptions import ConfigurationError, InvalidAddressError


# Multicall3 contract (same address on every chain it is deployed to)
MULTICALL3_ADDRESS = "0xcA11bde05977b3631167028862bE2a173976CA11"

BlockIdentifier = Union[int, str]


class Call(NamedTuple):
    """One labelled entry of a batch"""

    name: str
    target: str
    method: str
    call_data: bytes


class CallResult(NamedTuple):
    success: bool
    return_data: bytes


def to_address(address: str) -> str:
    """
    Checksum an address

    Raises:
        InvalidAddressError: Not a 20-byte hex address
    """
    try:
        return Web3.to_checksum_address(address)
    except (TypeError, ValueError) as e:
        raise InvalidAddressError(address) from e


class MultiCaller:
    """
    Runs batches of calls through ``tryBlockAndAggregate``

    Calls that revert are reported with ``success=False`` instead of
    failing the whole batch.
    """

    def __init__(self, w3: Web3, address: str = MULTICALL3_ADDRESS, chunk_size: int = 50):
        """
        Initialize MultiCaller

        Args:
            w3: Web3 instance
            address: Aggregator contract address
            chunk_size: Max calls per aggregator call

        Raises:
            InvalidAddressError: Malformed aggregator address
            ConfigurationError: chunk_size below 1
        """
        if chunk_size < 1:
            raise ConfigurationError(f"chunk_size must be positive, got {chunk_size}")

        self.w3 = w3
        self.address = to_address(address)
        self.chunk_size = chunk_size

        self.contract = self.w3.eth.contract(
            address=self.address,
            abi=self._get_multicall_abi()
        )

        logger.info(f"MultiCaller initialized at {self.address} with chunk size: {chunk_size}")

    def execute(
        self,
        calls: Sequence[Call],
        block_number: Optional[int] = None
    ) -> Tuple[Optional[int], Dict[str, CallResult]]:
        """
        Execute calls in as few RPC requests as the chunk size allows

        Every chunk after the first is pinned to the block the first one
        was read at, so all results come from the same block.

        Args:
            calls: Calls to execute
            block_number: Block to read at (None = latest)

        Returns:
            Tuple of (block number used, results keyed by call name).
            Calls sharing a name keep the last result.
        """
        if not calls:
            return block_number, {}

        chunks = [
            calls[i:i + self.chunk_size]
            for i in range(0, len(calls), self.chunk_size)
        ]

        block_identifier: BlockIdentifier = block_number if block_number is not None else "latest"
        results: Dict[str, CallResult] = {}

        for chunk in chunks:
            chunk_block, chunk_results = self._execute_chunk(chunk, block_identifier)
            block_identifier = chunk_block

            for call, result in zip(chunk, chunk_results):
                results[call.name] = result

        logger.debug(f"Executed {len(calls)} calls in {len(chunks)} chunk(s) at block {block_identifier}")
        return block_identifier, results

    def _execute_chunk(
        self,
        calls: Sequence[Call],
        block_identifier: BlockIdentifier
    ) -> Tuple[int, List[CallResult]]:
        multicall_calls = [(call.target, call.call_data) for call in calls]

        block, _block_hash, return_data = self.contract.functions.tryBlockAndAggregate(
            False,
            multicall_calls
        ).call(block_identifier=block_identifier)

        if len(return_data) != len(calls):
            raise ValueError(
                f"Aggregator returned {len(return_data)} results for {len(calls)} calls"
            )

        return int(block), [
            CallResult(bool(success), bytes(data))
            for success, data in return_data
        ]

    def _get_multicall_abi(self) -> List[Dict]:
        """Get the tryBlockAndAggregate ABI shared by Multicall2 and Multicall3"""
        return [
            {
                "inputs": [
                    {"name": "requireSuccess", "type": "bool"},
                    {
                        "components": [
                            {"name": "target", "type": "address"},
                            {"name": "callData", "type": "bytes"}
                        ],
                        "name": "calls",
                        "type": "tuple[]"
                    }
                ],
                "name": "tryBlockAndAggregate",
                "outputs": [
                    {"name": "blockNumber", "type": "uint256"},
                    {"name": "blockHash", "type": "bytes32"},
                    {
                        "components": [
                            {"name": "success", "type": "bool"},
                            {"name": "returnData", "type": "bytes"}
                        ],
                        "name": "returnData",
                        "type": "tuple[]"
                    }
                ],
                "stateMutability": "view",
                "type": "function"
            }
        ]
