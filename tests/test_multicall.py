"""
Unit Tests for MultiCaller
Web3 is mocked, no node required
"""

import pytest
from unittest.mock import MagicMock

from viewcall.exceptions import ConfigurationError, InvalidAddressError
from viewcall.multicall import MULTICALL3_ADDRESS, Call, CallResult, MultiCaller


TOKEN = '0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48'
BLOCK_HASH = b'\x00' * 32


@pytest.fixture
def w3():
    """Mock Web3 instance"""
    return MagicMock()


@pytest.fixture
def aggregate(w3):
    """Mocked tryBlockAndAggregate contract function"""
    return w3.eth.contract.return_value.functions.tryBlockAndAggregate


def _calls(count, prefix='c'):
    return [
        Call(name=f"{prefix}{i}", target=TOKEN, method='totalSupply', call_data=bytes([i]))
        for i in range(count)
    ]


class TestMultiCaller:

    def test_default_address(self, w3):
        caller = MultiCaller(w3)

        assert caller.address == MULTICALL3_ADDRESS
        assert w3.eth.contract.call_args.kwargs['address'] == MULTICALL3_ADDRESS

    def test_address_checksummed(self, w3):
        caller = MultiCaller(w3, MULTICALL3_ADDRESS.lower())

        assert caller.address == MULTICALL3_ADDRESS

    @pytest.mark.parametrize('address', ['0xAAA', 'not an address', '', None])
    def test_invalid_address(self, w3, address):
        with pytest.raises(InvalidAddressError):
            MultiCaller(w3, address)

    @pytest.mark.parametrize('chunk_size', [0, -1])
    def test_invalid_chunk_size(self, w3, chunk_size):
        with pytest.raises(ConfigurationError):
            MultiCaller(w3, chunk_size=chunk_size)

    def test_empty_batch_skips_rpc(self, w3, aggregate):
        caller = MultiCaller(w3)

        assert caller.execute([], 17) == (17, {})
        assert caller.execute([]) == (None, {})
        aggregate.assert_not_called()

    def test_execute(self, w3, aggregate):
        aggregate.return_value.call.return_value = (
            123, BLOCK_HASH, [(True, b'\x01'), (False, b'')]
        )
        caller = MultiCaller(w3)

        block, results = caller.execute(_calls(2))

        assert block == 123
        assert results == {
            'c0': CallResult(True, b'\x01'),
            'c1': CallResult(False, b''),
        }
        aggregate.assert_called_once_with(False, [(TOKEN, b'\x00'), (TOKEN, b'\x01')])
        aggregate.return_value.call.assert_called_once_with(block_identifier='latest')

    def test_execute_at_block(self, w3, aggregate):
        aggregate.return_value.call.return_value = (500, BLOCK_HASH, [(True, b'')])
        caller = MultiCaller(w3)

        block, _ = caller.execute(_calls(1), 500)

        assert block == 500
        aggregate.return_value.call.assert_called_once_with(block_identifier=500)

    def test_chunks_pinned_to_first_block(self, w3, aggregate):
        aggregate.return_value.call.side_effect = [
            (777, BLOCK_HASH, [(True, b'a'), (True, b'b')]),
            (777, BLOCK_HASH, [(True, b'c'), (True, b'd')]),
            (777, BLOCK_HASH, [(True, b'e')]),
        ]
        caller = MultiCaller(w3, chunk_size=2)

        block, results = caller.execute(_calls(5))

        assert block == 777
        assert [r.return_data for r in results.values()] == [b'a', b'b', b'c', b'd', b'e']

        identifiers = [c.kwargs['block_identifier'] for c in aggregate.return_value.call.call_args_list]
        assert identifiers == ['latest', 777, 777]
        assert [len(c.args[1]) for c in aggregate.call_args_list] == [2, 2, 1]

    def test_duplicate_names_keep_last(self, w3, aggregate):
        aggregate.return_value.call.return_value = (1, BLOCK_HASH, [(True, b'first'), (True, b'last')])
        caller = MultiCaller(w3)

        _, results = caller.execute(_calls(1, 'x') + [Call('x0', TOKEN, 'totalSupply', b'')])

        assert results == {'x0': CallResult(True, b'last')}

    def test_result_count_mismatch(self, w3, aggregate):
        aggregate.return_value.call.return_value = (1, BLOCK_HASH, [(True, b'')])
        caller = MultiCaller(w3)

        with pytest.raises(ValueError):
            caller.execute(_calls(2))

    def test_rpc_errors_propagate(self, w3, aggregate):
        aggregate.return_value.call.side_effect = ConnectionError("node down")
        caller = MultiCaller(w3)

        with pytest.raises(ConnectionError):
            caller.execute(_calls(1))
