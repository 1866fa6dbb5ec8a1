"""
Exceptions
Errors raised while registering methods, building and executing call batches
"""


class ViewCallError(Exception):
    """Base class for every error raised by viewcall"""


class MalformedSignatureError(ViewCallError):
    """Signature string is missing a required delimiter or a method name"""

    def __init__(self, signature: str, reason: str = "function is invalid format"):
        self.signature = signature
        super().__init__(f"{reason}: {signature!r}")


class DuplicateMethodError(ViewCallError):
    """A signature that case-folds to an already registered one was added"""

    def __init__(self, signature: str, existing: str):
        self.signature = signature
        self.existing = existing
        super().__init__(f"Method {existing!r} is already registered on ABI")


class AbiCompileError(ViewCallError):
    """ABI records could not be compiled into a ContractAbi"""


class InvalidAddressError(ViewCallError):
    """Address is not a 20-byte hex string"""

    def __init__(self, address):
        self.address = address
        super().__init__(f"Invalid address: {address!r}")


class ConfigurationError(ViewCallError):
    """Required setting is missing or malformed"""


class InvalidArgumentsError(ViewCallError):
    """Arguments do not match the inputs of the registered method"""


class UnknownMethodError(InvalidArgumentsError):
    """Method name is not present in the compiled ABI"""

    def __init__(self, method: str):
        self.method = method
        super().__init__(f"Method {method!r} not found in ABI")


class CallFailedError(ViewCallError):
    """Aggregator reported a failed (reverted) call, or returned nothing for it"""

    def __init__(self, name: str, method: str, return_data: bytes = b""):
        self.name = name
        self.method = method
        self.return_data = return_data
        super().__init__(f"Call {name!r} ({method}) failed")


class DecodeError(ViewCallError):
    """Return data could not be decoded with the method outputs"""

    def __init__(self, method: str, data: bytes, cause: Exception):
        self.method = method
        self.data = data
        self.cause = cause
        super().__init__(f"Cannot decode {len(data)} bytes returned by {method!r}: {cause}")
