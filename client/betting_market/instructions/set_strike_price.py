from podite import U64, pod
from solders.instruction import Instruction
from solders.pubkey import Pubkey

from .common import InstructionCode, check_u64, writable


@pod
class Params:
    instr: InstructionCode
    price: U64


def set_strike_price_ix(program_id: Pubkey, market: Pubkey, price: int) -> Instruction:
    params = Params(
        instr=InstructionCode.SET_STRIKE_PRICE, price=check_u64("price", price)
    )
    return Instruction(
        program_id=program_id, data=Params.to_bytes(params), accounts=[writable(market)]
    )
