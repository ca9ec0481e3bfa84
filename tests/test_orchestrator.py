import pytest
from bootcode.core.ir import ACC, JMP, NOP
from bootcode.errors import MachineCorruptionError
from bootcode.loader import parse
from bootcode.orchestrator import Reason, run
from bootcode.state import MachineState

SAMPLE = parse("nop +0\nacc +1\njmp +4\nacc +3\njmp -3\nacc -99\nacc +1\njmp -4\nacc +6\n")

def test_sample_loops_at_pc1_with_acc5():
    res = run(SAMPLE)
    assert res.reason is Reason.LOOP_DETECTED
    assert not res.halted
    assert res.state == MachineState(accumulator=5, pc=1)
    assert res.steps == 7

def test_single_acc_halts_immediately():
    res = run((ACC(42),))
    assert res.halted
    assert res.state == MachineState(accumulator=42, pc=1)
    assert res.steps == 1

def test_empty_program_halts():
    res = run(())
    assert res.reason is Reason.HALTED
    assert res.state == MachineState()

@pytest.mark.parametrize("program", [
    (ACC(1), NOP(5), ACC(-3), ACC(10), NOP(-2)),
    (NOP(0),) * 6,
    tuple(ACC(i) for i in range(-5, 6)),
])
def test_straight_line_programs_sum_accumulator(program):
    res = run(program)
    assert res.halted
    assert res.steps == len(program)
    assert res.state.accumulator == sum(i.arg for i in program if i.op.value == "acc")

def test_run_is_deterministic():
    assert run(SAMPLE) == run(SAMPLE)

def test_self_jump_loops_before_any_effect():
    res = run((ACC(3), JMP(0)))
    assert res.reason is Reason.LOOP_DETECTED
    assert res.state == MachineState(accumulator=3, pc=1)

@pytest.mark.parametrize("program,bad_pc", [
    ((ACC(1), JMP(5)), 6),
    ((JMP(-1),), -1),
])
def test_out_of_range_pc_is_corruption(program, bad_pc):
    with pytest.raises(MachineCorruptionError) as exc:
        run(program)
    assert exc.value.pc == bad_pc
    assert exc.value.length == len(program)

def test_trace_events():
    events = []
    run(SAMPLE, trace=lambda tag, payload: events.append((tag, payload)))
    tags = [t for t, _ in events]
    assert tags == ["step"] * 7 + ["loop"]
    first = events[0][1]
    assert first["pc"] == 0 and first["op"] == "nop" and first["pc_after"] == 1
    assert events[-1][1] == {"pc": 1, "acc": 5, "steps": 7}

def test_trace_reports_halt():
    events = []
    run((ACC(2),), trace=lambda tag, payload: events.append(tag))
    assert events == ["step", "halt"]
