from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from solana.exceptions import SolanaRpcException
from solders.hash import Hash
from solders.instruction import AccountMeta, Instruction
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature

from betting_market.errors import ConnectionFailure, InvalidArgument, MalformedAccount
from betting_market.utils.solana import Action, LedgerConnection, actionify

from conftest import FakeLedger, PROGRAM_ID


def noop_ix(*signers):
    return Instruction(
        PROGRAM_ID,
        b"\x00",
        [AccountMeta(pubkey=s, is_signer=True, is_writable=False) for s in signers],
    )


def mock_client():
    client = AsyncMock()
    client.get_latest_blockhash.return_value = SimpleNamespace(
        value=SimpleNamespace(blockhash=Hash.default())
    )
    client.send_transaction.return_value = SimpleNamespace(value=Signature.default())
    return client


class TestLedgerConnection:
    @pytest.mark.asyncio
    async def test_submit_signs_with_required_keypairs(self):
        client = mock_client()
        ledger = LedgerConnection(client)
        payer, other, unused = Keypair(), Keypair(), Keypair()

        signature = await ledger.submit([noop_ix(other.pubkey())], payer, [unused, other])

        assert signature == Signature.default()
        (tx,), _ = client.send_transaction.call_args
        assert len(tx.signatures) == 2
        assert tx.message.account_keys[0] == payer.pubkey()
        client.confirm_transaction.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_submit_without_confirmation(self):
        client = mock_client()
        ledger = LedgerConnection(client, skip_confirmation=True)
        await ledger.submit([noop_ix()], Keypair())
        client.confirm_transaction.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_signer(self):
        client = mock_client()
        ledger = LedgerConnection(client)
        with pytest.raises(InvalidArgument):
            await ledger.submit([noop_ix(Pubkey.new_unique())], Keypair())
        client.send_transaction.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_transport_errors_become_connection_failures(self):
        client = mock_client()
        client.get_account_info.side_effect = OSError("connection refused")
        ledger = LedgerConnection(client)
        with pytest.raises(ConnectionFailure):
            await ledger.get_account_raw(Pubkey.new_unique())

    @pytest.mark.asyncio
    async def test_rpc_errors_become_connection_failures(self):
        client = mock_client()
        client.send_transaction.side_effect = SolanaRpcException(
            OSError("timeout"), client.send_transaction, None, None
        )
        ledger = LedgerConnection(client)
        with pytest.raises(ConnectionFailure):
            await ledger.submit([noop_ix()], Keypair())

    @pytest.mark.asyncio
    async def test_missing_account(self):
        client = mock_client()
        client.get_account_info.return_value = SimpleNamespace(value=None)
        ledger = LedgerConnection(client)
        assert not await ledger.account_exists(Pubkey.new_unique())
        with pytest.raises(MalformedAccount):
            await ledger.get_account_raw(Pubkey.new_unique())


class TestActionify:
    @pytest.mark.asyncio
    async def test_single_instruction(self):
        ledger, payer = FakeLedger(), Keypair()

        @actionify
        def build(x):
            return noop_ix()

        assert await build(ledger, payer, 1) == Signature.default()
        assert ledger.submitted[0].payer == payer
        assert build.make(1) == noop_ix()

    @pytest.mark.asyncio
    async def test_action_carries_signers(self):
        ledger, extra = FakeLedger(), Keypair()

        @actionify
        def build():
            return Action([noop_ix(), noop_ix()], signers=[extra])

        await build(ledger, Keypair())
        assert len(ledger.submitted[0].instructions) == 2
        assert ledger.submitted[0].signers == [extra]

    @pytest.mark.asyncio
    async def test_none_skips_submission(self):
        ledger = FakeLedger()

        @actionify(post_process=lambda sig: ("done", sig))
        def build():
            return None

        assert await build(ledger, Keypair()) == ("done", None)
        assert ledger.submitted == []
