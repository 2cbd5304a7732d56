import inspect
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from functools import wraps
from typing import Iterable, List, Optional, Sequence

from solana.exceptions import SolanaRpcException
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment, Confirmed
from solana.rpc.core import (
    RPCException,
    RPCNoResultException,
    TransactionExpiredBlockheightExceededError,
    UnconfirmedTxError,
)
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.message import MessageV0
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import VersionedTransaction

from betting_market.errors import ConnectionFailure, InvalidArgument, MalformedAccount

logger = logging.getLogger(__name__)

TRANSPORT_ERRORS = (
    SolanaRpcException,
    RPCException,
    RPCNoResultException,
    UnconfirmedTxError,
    TransactionExpiredBlockheightExceededError,
    OSError,
)


@contextmanager
def transport_errors(what: str):
    try:
        yield
    except TRANSPORT_ERRORS as e:
        raise ConnectionFailure(f"{what} failed: {e}") from e


class LedgerConnection:
    """
    Thin asynchronous wrapper over the RPC client.

    Every RPC failure surfaces as ``ConnectionFailure``; nothing is retried.
    """

    def __init__(
        self,
        client: AsyncClient,
        commitment: Commitment = Confirmed,
        skip_confirmation: bool = False,
    ):
        self.client = client
        self.commitment = commitment
        self.skip_confirmation = skip_confirmation

    @classmethod
    def connect(cls, url: str, commitment: Commitment = Confirmed, **kwargs):
        return cls(AsyncClient(url, commitment=commitment), commitment, **kwargs)

    async def close(self):
        await self.client.close()

    async def get_account_info(self, address: Pubkey):
        with transport_errors(f"get_account_info({address})"):
            resp = await self.client.get_account_info(address, commitment=self.commitment)
        return resp.value

    async def get_account_raw(self, address: Pubkey) -> bytes:
        info = await self.get_account_info(address)
        if info is None:
            raise MalformedAccount(f"Account {address} does not exist")
        return bytes(info.data)

    async def account_exists(self, address: Pubkey) -> bool:
        return await self.get_account_info(address) is not None

    async def calc_rent(self, space: int) -> int:
        with transport_errors("get_minimum_balance_for_rent_exemption"):
            resp = await self.client.get_minimum_balance_for_rent_exemption(
                space, commitment=self.commitment
            )
        return resp.value

    async def token_balance(self, address: Pubkey) -> str:
        with transport_errors(f"get_token_account_balance({address})"):
            resp = await self.client.get_token_account_balance(
                address, commitment=self.commitment
            )
        return resp.value.ui_amount_string

    async def submit(
        self,
        instructions: Sequence[Instruction],
        payer: Keypair,
        signers: Iterable[Keypair] = (),
    ) -> Signature:
        # keep only the keypairs the message actually asks for, in message order
        available = {payer.pubkey(): payer}
        for signer in signers:
            available.setdefault(signer.pubkey(), signer)

        with transport_errors("get_latest_blockhash"):
            blockhash_resp = await self.client.get_latest_blockhash(self.commitment)
        message = MessageV0.try_compile(
            payer=payer.pubkey(),
            instructions=list(instructions),
            address_lookup_table_accounts=[],
            recent_blockhash=blockhash_resp.value.blockhash,
        )
        required = message.account_keys[: message.header.num_required_signatures]
        missing = [str(key) for key in required if key not in available]
        if missing:
            raise InvalidArgument(f"Required signer Pubkeys not in list of Keypairs: {missing}")
        tx = VersionedTransaction(message, [available[key] for key in required])

        with transport_errors("send_transaction"):
            resp = await self.client.send_transaction(tx)
        signature = resp.value
        logger.info("Submitted transaction %s", signature)

        if not self.skip_confirmation:
            with transport_errors(f"confirm_transaction({signature})"):
                await self.client.confirm_transaction(signature, self.commitment)
            logger.debug("Confirmed transaction %s", signature)
        return signature


@dataclass
class Action:
    instructions: List[Instruction]
    signers: List[Keypair] = field(default_factory=list)


def actionify(func=None, /, post_process=lambda signature: signature):
    """
    Turns a builder of instructions into a coroutine that submits them.

    The decorated function is called as ``send(ledger, payer, *args, **kwargs)``;
    the builder itself stays reachable as ``send.make``. A builder may return an
    ``Instruction``, a list of them, an ``Action`` carrying extra signers, or
    ``None`` to skip submission.
    """

    def _actionify(make):
        @wraps(make)
        async def send(ledger: LedgerConnection, payer: Keypair, *args, **kwargs):
            action = make(*args, **kwargs)
            if inspect.isawaitable(action):
                action = await action
            if action is None:
                return post_process(None)
            if isinstance(action, Instruction):
                action = Action([action])
            elif not isinstance(action, Action):
                action = Action(list(action))

            logger.info("Sending %s", make.__name__)
            signature = await ledger.submit(action.instructions, payer, action.signers)
            return post_process(signature)

        send.make = make
        return send

    if func is None:
        return _actionify
    return _actionify(func)


def maybe_pubkey(value: Optional[object]) -> Optional[Pubkey]:
    if value is None or isinstance(value, Pubkey):
        return value
    return Pubkey.from_string(str(value))
