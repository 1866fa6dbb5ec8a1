"""
viewcall
Batch read-only contract calls described by compact signatures into one multicall
"""

from .abi import ContractAbi
from .config import Settings, load_settings
from .contract import BatchResult, Contract, ContractBuilder, ContractConfig, build_contract
from .exceptions import (
    AbiCompileError,
    CallFailedError,
    ConfigurationError,
    DecodeError,
    DuplicateMethodError,
    InvalidAddressError,
    InvalidArgumentsError,
    MalformedSignatureError,
    UnknownMethodError,
    ViewCallError,
)
from .multicall import MULTICALL3_ADDRESS, Call, CallResult, MultiCaller
from .registry import MethodRegistry
from .signature import Argument, Method, parse_signature

__all__ = [
    'AbiCompileError',
    'Argument',
    'BatchResult',
    'Call',
    'CallFailedError',
    'CallResult',
    'ConfigurationError',
    'Contract',
    'ContractAbi',
    'ContractBuilder',
    'ContractConfig',
    'DecodeError',
    'DuplicateMethodError',
    'InvalidAddressError',
    'InvalidArgumentsError',
    'MULTICALL3_ADDRESS',
    'MalformedSignatureError',
    'Method',
    'MethodRegistry',
    'MultiCaller',
    'Settings',
    'UnknownMethodError',
    'ViewCallError',
    'build_contract',
    'load_settings',
    'parse_signature',
]
