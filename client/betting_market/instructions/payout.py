from podite import pod
from solders.instruction import Instruction
from solders.pubkey import Pubkey

from .common import InstructionCode
from .offer_trade import TraderAccounts


@pod
class Params:
    instr: InstructionCode


def payout_ix(program_id: Pubkey, accounts: TraderAccounts) -> Instruction:
    params = Params(instr=InstructionCode.PAYOUT)
    return Instruction(
        program_id=program_id,
        data=Params.to_bytes(params),
        accounts=accounts.to_account_metas(),
    )
