import dataclasses
import pytest
from bootcode.core.engine import step
from bootcode.core.ir import ACC, JMP, NOP, Instruction, Op, patch
from bootcode.state import MachineState

@pytest.mark.parametrize("insn,expected", [
    (ACC(7),   MachineState(accumulator=17, pc=4)),
    (ACC(-20), MachineState(accumulator=-10, pc=4)),
    (JMP(-3),  MachineState(accumulator=10, pc=0)),
    (JMP(5),   MachineState(accumulator=10, pc=8)),
    (NOP(-99), MachineState(accumulator=10, pc=4)),
])
def test_step(insn, expected):
    before = MachineState(accumulator=10, pc=3)
    assert step(before, insn) == expected

def test_step_leaves_input_untouched():
    before = MachineState(accumulator=1, pc=2)
    after = step(before, ACC(5))
    assert before == MachineState(accumulator=1, pc=2)
    assert after is not before

def test_state_is_frozen():
    st = MachineState()
    with pytest.raises(dataclasses.FrozenInstanceError):
        st.pc = 3

def test_flip_swaps_jmp_and_nop():
    assert JMP(-4).flipped() == NOP(-4)
    assert NOP(+2).flipped() == JMP(+2)
    with pytest.raises(ValueError):
        ACC(1).flipped()
    assert not ACC(1).flippable

def test_patch_returns_new_program():
    prog = (NOP(0), ACC(1), JMP(-2))
    fixed = patch(prog, 2)
    assert fixed == (NOP(0), ACC(1), NOP(-2))
    assert prog[2] == JMP(-2)
    with pytest.raises(IndexError):
        patch(prog, 3)

def test_instruction_equality_and_hash():
    assert Instruction(Op.ACC, 3) == ACC(3)
    assert len({ACC(3), ACC(3), NOP(3)}) == 2
