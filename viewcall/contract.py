"""
Contract Session
Registers methods by signature, queues labelled calls and runs them as one multicall
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Optional, Tuple

from web3 import Web3
from loguru import logger

from .abi import ContractAbi
from .config import Settings
from .exceptions import CallFailedError, ConfigurationError, DecodeError, ViewCallError
from .multicall import MULTICALL3_ADDRESS, Call, MultiCaller, to_address
from .registry import MethodRegistry


@dataclass
class BatchResult:
    """
    Outcome of Contract.call()

    ``values`` holds the decoded outputs of every call that succeeded,
    ``errors`` the per-call failures, and ``error`` the exception raised by
    the aggregator call itself (in which case ``values`` is empty).
    """

    block_number: Optional[int] = None
    values: Dict[str, List[Any]] = field(default_factory=dict)
    errors: Dict[str, ViewCallError] = field(default_factory=dict)
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None and not self.errors

    def __getitem__(self, name: str) -> List[Any]:
        return self.values[name]

    def raise_for_error(self):
        """Re-raise the aggregator exception, if the batch failed as a whole"""
        if self.error is not None:
            raise self.error


class Contract:
    """
    Multicall session

    Not thread-safe: one session must not be shared between concurrent
    callers. The pending batch is emptied by every call().
    """

    def __init__(self, multi_caller: MultiCaller, registry: Optional[MethodRegistry] = None):
        self.multi_caller = multi_caller
        self.registry = registry if registry is not None else MethodRegistry()
        self._calls: List[Call] = []

    @property
    def abi(self) -> ContractAbi:
        return self.registry.abi

    @property
    def pending_calls(self) -> Tuple[Call, ...]:
        return tuple(self._calls)

    def add_method(self, signature: str) -> ContractAbi:
        """Register a method by signature; see MethodRegistry.add"""
        abi = self.registry.add(signature)
        logger.info(f"Method added: {signature.strip()}")
        return abi

    def add_call(self, name: str, contract_address: str, method: str, *args: Any) -> "Contract":
        """
        Queue a call

        Names label results; if two queued calls share a name only the
        last one ends up in the BatchResult.

        Args:
            name: Result label
            contract_address: Target contract
            method: Registered method name
            *args: Method arguments

        Returns:
            This session, so calls can be chained

        Raises:
            InvalidAddressError: Malformed target address
            UnknownMethodError: Method not registered
            InvalidArgumentsError: Arguments do not match the method inputs
        """
        target = to_address(contract_address)
        call_data = self.abi.encode(method, *args)

        self._calls.append(Call(
            name=name,
            target=target,
            method=method,
            call_data=call_data
        ))

        logger.debug(f"Queued {name}: {method} on {target}")
        return self

    def call(self, block_number: Optional[int] = None) -> BatchResult:
        """
        Execute every queued call in one aggregator round trip

        Args:
            block_number: Block to read at (None = latest)

        Returns:
            BatchResult; aggregator failures are returned in ``error``,
            not raised
        """
        calls = list(self._calls)
        result = BatchResult(block_number=block_number)

        try:
            try:
                result.block_number, raw_results = self.multi_caller.execute(calls, block_number)
            except Exception as e:
                logger.error(f"Error executing multicall of {len(calls)} calls: {e}")
                result.error = e
                return result

            for call in calls:
                self._collect(result, call, raw_results.get(call.name))

            logger.info(
                f"Multicall executed at block {result.block_number}: "
                f"{len(result.values)} ok, {len(result.errors)} failed"
            )
            return result

        finally:
            self.clear_calls()

    def clear_calls(self):
        self._calls = []

    def _collect(self, result: BatchResult, call: Call, raw):
        result.values.pop(call.name, None)
        result.errors.pop(call.name, None)

        if raw is None or not raw.success:
            return_data = raw.return_data if raw is not None else b""
            result.errors[call.name] = CallFailedError(call.name, call.method, return_data)
            logger.warning(f"Call {call.name} ({call.method} on {call.target}) failed")
            return

        try:
            result.values[call.name] = self.abi.decode(call.method, raw.return_data)
        except DecodeError as e:
            result.errors[call.name] = e
            logger.warning(f"Call {call.name}: {e}")


@dataclass
class ContractConfig:
    """Everything build_contract() needs to create a session"""

    client: Optional[Web3] = None
    address: Optional[str] = None
    methods: List[str] = field(default_factory=list)
    chunk_size: int = 50

    @classmethod
    def from_settings(cls, settings: Settings, methods: Iterable[str] = ()) -> "ContractConfig":
        return cls(
            client=settings.web3(),
            address=settings.multicall_address,
            methods=list(methods),
            chunk_size=settings.chunk_size,
        )


def build_contract(config: ContractConfig) -> Contract:
    """
    Create a session from a config

    Raises:
        ConfigurationError: Client or aggregator address missing, chunk size below 1
        InvalidAddressError: Malformed aggregator address
        DuplicateMethodError, MalformedSignatureError: Bad method list
    """
    if config.client is None:
        raise ConfigurationError("A web3 client is required")
    if not config.address:
        raise ConfigurationError("An aggregator contract address is required")
    if config.chunk_size < 1:
        raise ConfigurationError(f"chunk_size must be positive, got {config.chunk_size}")

    contract = Contract(MultiCaller(config.client, config.address, config.chunk_size))
    for signature in config.methods:
        contract.add_method(signature)

    return contract


class ContractBuilder:
    """
    Fluent front-end for ContractConfig

    Nothing is validated or resolved until build(). A config passed in is
    copied, the caller's object is never modified.
    """

    def __init__(self, config: Optional[ContractConfig] = None):
        if config is None:
            config = ContractConfig()
        self.config = replace(config, methods=list(config.methods))

    def with_client(self, w3: Web3) -> "ContractBuilder":
        self.config.client = w3
        return self

    def at_address(self, address: str = MULTICALL3_ADDRESS) -> "ContractBuilder":
        self.config.address = address
        return self

    def with_chunk_size(self, chunk_size: int) -> "ContractBuilder":
        self.config.chunk_size = chunk_size
        return self

    def add_method(self, signature: str) -> "ContractBuilder":
        self.config.methods.append(signature)
        return self

    def build(self) -> Contract:
        return build_contract(self.config)
