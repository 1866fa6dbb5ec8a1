"""
Method Registry
Collects methods registered by signature and keeps one compiled ABI for all of them
"""

from typing import Dict, List, Tuple

from loguru import logger

from .abi import ContractAbi
from .exceptions import DuplicateMethodError
from .signature import Method, parse_signature


class MethodRegistry:
    """
    Ordered set of registered methods

    Signatures are compared case-insensitively. The ABI is recompiled from
    the whole method list on every addition, never patched in place.
    """

    def __init__(self):
        self._raw_methods: Dict[str, str] = {}
        self._methods: List[Method] = []
        self._abi = ContractAbi()

    @property
    def abi(self) -> ContractAbi:
        """Latest compiled ABI"""
        return self._abi

    @property
    def methods(self) -> Tuple[Method, ...]:
        return tuple(self._methods)

    def __contains__(self, signature: str) -> bool:
        return signature.lower() in self._raw_methods

    def __len__(self) -> int:
        return len(self._methods)

    def add(self, signature: str) -> ContractAbi:
        """
        Register a method and recompile the ABI

        Nothing is stored unless parsing and compilation both succeed.

        Args:
            signature: Compact signature, e.g. ``function balanceOf(address)(uint256)``

        Returns:
            The new compiled ABI

        Raises:
            DuplicateMethodError: Same signature (ignoring case) already registered
            MalformedSignatureError: Signature cannot be parsed
            AbiCompileError: A type is not supported by eth-abi
        """
        key = signature.lower()
        existing = self._raw_methods.get(key)
        if existing is not None:
            raise DuplicateMethodError(signature, existing)

        method = parse_signature(signature)
        methods = self._methods + [method]
        abi = repack_abi(methods)

        self._raw_methods[key] = signature
        self._methods = methods
        self._abi = abi

        logger.debug(f"Registered {method.signature} -> ({','.join(method.output_types)})")
        return abi

    def to_abi(self) -> List[Dict]:
        return [method.to_abi() for method in self._methods]


def repack_abi(methods: List[Method]) -> ContractAbi:
    """Compile a full ABI from an ordered list of methods"""
    return ContractAbi(method.to_abi() for method in methods)
