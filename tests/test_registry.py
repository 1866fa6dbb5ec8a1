"""
Unit Tests for MethodRegistry
"""

import pytest

from viewcall.exceptions import AbiCompileError, DuplicateMethodError, MalformedSignatureError
from viewcall.registry import MethodRegistry


@pytest.fixture
def registry():
    return MethodRegistry()


class TestMethodRegistry:

    def test_starts_empty(self, registry):
        assert len(registry) == 0
        assert registry.abi.names == []

    def test_add_returns_new_abi(self, registry):
        abi = registry.add('function balanceOf(address)(uint256)')

        assert abi is registry.abi
        assert 'balanceOf' in abi
        assert 'function balanceOf(address)(uint256)' in registry

    def test_abi_rebuilt_with_every_method(self, registry):
        first = registry.add('function totalSupply()(uint256)')
        second = registry.add('function decimals()(uint8)')

        assert first is not second
        assert first.names == ['totalSupply']
        assert second.names == ['totalSupply', 'decimals']
        assert [m.name for m in registry.methods] == ['totalSupply', 'decimals']

    def test_duplicate_ignores_case(self, registry):
        registry.add('function balanceOf(address)(uint256)')
        abi = registry.abi

        with pytest.raises(DuplicateMethodError) as exc_info:
            registry.add('FUNCTION BALANCEOF(ADDRESS)(UINT256)')

        assert exc_info.value.existing == 'function balanceOf(address)(uint256)'
        assert registry.abi is abi
        assert len(registry) == 1

    def test_same_name_other_signature_allowed(self, registry):
        registry.add('balanceOf(address)(uint256)')
        abi = registry.add('balanceOf(address,uint256)(uint256)')

        assert abi.names == ['balanceOf', 'balanceOf0']

    def test_malformed_signature_not_stored(self, registry):
        with pytest.raises(MalformedSignatureError):
            registry.add('balanceOf')

        assert 'balanceOf' not in registry
        assert len(registry) == 0

    def test_compile_failure_not_stored(self, registry):
        registry.add('totalSupply()(uint256)')
        abi = registry.abi

        with pytest.raises(AbiCompileError):
            registry.add('foo(notatype)(uint256)')

        assert 'foo(notatype)(uint256)' not in registry
        assert registry.abi is abi
        assert len(registry) == 1

        # nothing was reserved by the failed attempt
        registry.add('foo(uint256)(uint256)')
        assert registry.abi.names == ['totalSupply', 'foo']

    def test_to_abi(self, registry):
        registry.add('owner()(address)')

        assert registry.to_abi() == [{
            'name': 'owner',
            'inputs': [],
            'outputs': [{'name': '', 'type': 'address', 'internalType': 'address'}],
            'type': 'function',
            'stateMutability': 'view',
        }]
