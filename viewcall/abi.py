"""
Contract ABI
Compiles ABI function records and packs/unpacks call data with eth-abi
"""

import json
from typing import Any, Dict, Iterable, List, NamedTuple, Tuple

from eth_abi import decode, encode, is_encodable_type
from eth_abi.exceptions import DecodingError, EncodingError
from eth_abi.grammar import BasicType, normalize, parse
from web3 import Web3

from .exceptions import (
    AbiCompileError,
    DecodeError,
    InvalidArgumentsError,
    UnknownMethodError,
)


class AbiFunction(NamedTuple):
    """Compiled function entry"""

    name: str
    raw_name: str
    input_types: Tuple[str, ...]
    output_types: Tuple[str, ...]
    selector: bytes

    @property
    def signature(self) -> str:
        return f"{self.raw_name}({','.join(self.input_types)})"


class ContractAbi:
    """
    Compiled interface description

    Built from ABI JSON records (the shape solc emits, or Method.to_abi()).
    Overloaded functions keep their first name, later ones are exposed as
    ``name0``, ``name1`` and so on.
    """

    def __init__(self, records: Iterable[Dict] = ()):
        """
        Compile ABI records

        Args:
            records: ABI entries; anything that is not a function is ignored

        Raises:
            AbiCompileError: Entry without a name or with an unknown type
        """
        self._records: List[Dict] = list(records)
        self.functions: Dict[str, AbiFunction] = {}

        for record in self._records:
            if record.get("type", "function") != "function":
                continue
            fn = self._compile_function(record)
            self.functions[fn.name] = fn

    @classmethod
    def from_json(cls, abi_json: str) -> "ContractAbi":
        try:
            records = json.loads(abi_json)
        except ValueError as e:
            raise AbiCompileError(f"ABI is not valid JSON: {e}") from e

        if not isinstance(records, list):
            raise AbiCompileError("ABI JSON must be a list of entries")

        return cls(records)

    def to_json(self) -> str:
        return json.dumps(self._records)

    @property
    def names(self) -> List[str]:
        return list(self.functions)

    def __contains__(self, name: str) -> bool:
        return name in self.functions

    def __getitem__(self, name: str) -> AbiFunction:
        try:
            return self.functions[name]
        except KeyError:
            raise UnknownMethodError(name) from None

    def __len__(self) -> int:
        return len(self.functions)

    def encode(self, name: str, *args: Any) -> bytes:
        """
        Build call data for a function

        Args:
            name: Function name in this ABI
            *args: Positional arguments, in input order

        Returns:
            4-byte selector followed by the encoded arguments

        Raises:
            UnknownMethodError: Name not in ABI
            InvalidArgumentsError: Wrong number or type of arguments
        """
        fn = self[name]

        if len(args) != len(fn.input_types):
            raise InvalidArgumentsError(
                f"{fn.signature} takes {len(fn.input_types)} arguments, got {len(args)}"
            )

        try:
            return fn.selector + encode(list(fn.input_types), list(args))
        except (EncodingError, TypeError, ValueError) as e:
            raise InvalidArgumentsError(f"Invalid arguments for {fn.signature}: {e}") from e

    def decode(self, name: str, data: bytes) -> List[Any]:
        """
        Decode return data of a function into its output values

        Raises:
            UnknownMethodError: Name not in ABI
            DecodeError: Data does not match the output types
        """
        fn = self[name]

        try:
            values = decode(list(fn.output_types), bytes(data))
        except (DecodingError, TypeError, ValueError) as e:
            raise DecodeError(name, bytes(data), e) from e

        return [
            _checksum_addresses(type_str, value)
            for type_str, value in zip(fn.output_types, values)
        ]

    def _compile_function(self, record: Dict) -> AbiFunction:
        raw_name = record.get("name")
        if not raw_name:
            raise AbiCompileError(f"Function entry without a name: {record}")

        input_types = tuple(_collapse_type(arg, raw_name) for arg in record.get("inputs", []))
        output_types = tuple(_collapse_type(arg, raw_name) for arg in record.get("outputs", []))

        signature = f"{raw_name}({','.join(input_types)})"
        return AbiFunction(
            name=self._resolve_name_conflict(raw_name),
            raw_name=raw_name,
            input_types=input_types,
            output_types=output_types,
            selector=bytes(Web3.keccak(text=signature)[:4]),
        )

    def _resolve_name_conflict(self, raw_name: str) -> str:
        name = raw_name
        idx = 0
        while name in self.functions:
            name = f"{raw_name}{idx}"
            idx += 1
        return name


def _collapse_type(arg: Dict, function_name: str) -> str:
    """Canonical type string of an ABI argument, tuples written as (a,b)"""
    type_str = arg.get("type", "")

    if type_str.startswith("tuple"):
        components = ",".join(
            _collapse_type(component, function_name)
            for component in arg.get("components", [])
        )
        type_str = f"({components}){type_str[len('tuple'):]}"

    type_str = normalize(type_str)
    if not type_str or not is_encodable_type(type_str):
        raise AbiCompileError(f"Unsupported type {arg.get('type')!r} in {function_name!r}")

    return type_str


def _checksum_addresses(type_str: str, value: Any) -> Any:
    abi_type = parse(type_str)
    if not isinstance(abi_type, BasicType) or abi_type.base != "address":
        return value

    if not abi_type.arrlist:
        return Web3.to_checksum_address(value)

    inner = abi_type.item_type.to_type_str()
    return tuple(_checksum_addresses(inner, item) for item in value)
