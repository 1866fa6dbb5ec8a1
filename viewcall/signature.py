"""
Signature Parser
Turns compact signature strings such as
``function balanceOf(address)(uint256)`` into ABI method descriptions
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from .exceptions import MalformedSignatureError


FUNCTION_TYPE = "function"
VIEW_MUTABILITY = "view"

# "function" is only a keyword when it is followed by whitespace
_KEYWORD_RE = re.compile(r"^function(?:\s+|$)")


@dataclass(frozen=True)
class Argument:
    """Single unnamed ABI input or output"""

    type: str
    name: str = ""
    internal_type: str = ""

    def __post_init__(self):
        if not self.internal_type:
            object.__setattr__(self, "internal_type", self.type)

    def to_abi(self) -> Dict[str, str]:
        return {
            "name": self.name,
            "type": self.type,
            "internalType": self.internal_type,
        }


@dataclass(frozen=True)
class Method:
    """
    View function description built from one signature string

    Serialises to the same record shape a compiler emits in an ABI file,
    so a list of methods can be compiled by ContractAbi as is.
    """

    name: str
    inputs: Tuple[Argument, ...] = field(default_factory=tuple)
    outputs: Tuple[Argument, ...] = field(default_factory=tuple)
    type: str = FUNCTION_TYPE
    state_mutability: str = VIEW_MUTABILITY

    @property
    def input_types(self) -> List[str]:
        return [arg.type for arg in self.inputs]

    @property
    def output_types(self) -> List[str]:
        return [arg.type for arg in self.outputs]

    @property
    def signature(self) -> str:
        """Canonical ``name(type1,type2)`` text, as used for the selector"""
        return f"{self.name}({','.join(self.input_types)})"

    def to_abi(self) -> Dict:
        return {
            "name": self.name,
            "inputs": [arg.to_abi() for arg in self.inputs],
            "outputs": [arg.to_abi() for arg in self.outputs],
            "type": self.type,
            "stateMutability": self.state_mutability,
        }


def parse_signature(signature: str) -> Method:
    """
    Parse a compact signature into a Method

    Two shapes are accepted:
        name(in1,in2)(out1,out2)   any number of outputs
        name(in1,in2)out           a single output

    A leading ``function`` keyword is optional. Blank type tokens
    (``foo()``, trailing or doubled commas) are dropped on both sides.

    Args:
        signature: Signature string

    Returns:
        Parsed Method with ``view`` mutability

    Raises:
        MalformedSignatureError: No ``(``, no ``)`` or an empty name
    """
    head, paren, _ = signature.partition("(")
    if not paren:
        raise MalformedSignatureError(signature)

    name = _KEYWORD_RE.sub("", head.strip(), count=1).strip()
    if not name:
        raise MalformedSignatureError(signature, "method name is missing")

    if ")(" in signature:
        input_clause, _, output_clause = signature.partition(")(")
        input_tokens = _split_types(input_clause.partition("(")[2])

        output_clause = output_clause.rstrip()
        if output_clause.endswith(")"):
            output_clause = output_clause[:-1]
        output_tokens = _split_types(output_clause)
    else:
        parts = signature.split(")")
        if len(parts) < 2:
            raise MalformedSignatureError(signature, "closing parenthesis is missing")

        input_tokens = _split_types(parts[0].partition("(")[2])

        # Only one return value in this form, commas are kept verbatim
        return_type = parts[1].strip()
        output_tokens = [return_type] if return_type else []

    return Method(
        name=name,
        inputs=tuple(Argument(type=token) for token in input_tokens),
        outputs=tuple(Argument(type=token) for token in output_tokens),
    )


def _split_types(clause: str) -> List[str]:
    tokens = (token.strip() for token in clause.split(","))
    return [token for token in tokens if token]
