## tinyforth — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import pytest

from tinyforth.runtime import Runtime
from tinyforth.interpreter import State, evaluate, interpret
from tinyforth.builtins import load_builtins_library
from tinyforth.errors import ForthInvalidWord, ForthUnknownWord, ForthStackUnderflow
from tinyforth.parser import parse
from tinyforth.types import Operation, nil


def run(*sources: str) -> list:
    rt = Runtime()
    for source in sources:
        rt.evaluate(source)
    return rt.current_stack()


def test_user_words_consist_of_builtins():
    assert run(": dup-twice dup dup ;", "1 dup-twice") == [1, 1, 1]


def test_user_words_execute_in_order():
    assert run(": countup 1 2 3 ;", "countup") == [1, 2, 3]


def test_redefining_words():
    assert run(": foo dup ;", ": foo dup dup ;", "1 foo") == [1, 1, 1]
    assert run(": swap dup ;", "1 swap") == [1, 1]
    assert run(": + * ;", "3 4 +") == [12]


def test_user_words_are_case_insensitive():
    assert run(": foo dup ;", "1 FOO Foo foo") == [1, 1, 1, 1]
    assert run(": SWAP DUP Dup dup ;", "1 swap") == [1, 1, 1, 1]


def test_references_are_bound_at_definition_time():
    assert run(": foo 5 ;", ": bar foo ;", ": foo 6 ;", "bar foo") == [5, 6]
    assert run(": foo 5 ;", ": bar foo ;", ": foo 6 ;", ": bar foo ;", "bar foo") == [6, 6]


def test_word_using_its_previous_definition():
    assert run(": foo 10 ;", ": foo foo 1 + ;", "foo") == [11]


def test_definitions_mixed_with_execution():
    assert run(": one 1 ; : two 2 ; one two +") == [3]
    assert run("1 2 + : addone 1 + ; addone") == [4]


def test_definitions_span_lines_within_one_batch():
    assert run(": square\n  dup *\n;\n5 square") == [25]


@pytest.mark.parametrize("source", [
    ": 1 2 ;",      # numeric name
    ":",            # unterminated, no name
    ": foo",        # unterminated, no body
    ": foo 1",      # unterminated body
    ";",            # stray terminator
    "1 2 ;",
    ": : 1 ;",      # marker as name
    ": ; 1",
    ": foo ;",      # empty body
    ": foo : bar 1 ; ;",  # nested definition
])
def test_invalid_definitions(source):
    with pytest.raises(ForthInvalidWord) as info:
        run(source)
    assert info.value.kind == "InvalidWord"


def test_unknown_words():
    with pytest.raises(ForthUnknownWord):
        run("1 foo")
    with pytest.raises(ForthUnknownWord):
        run(": bar undefined-word ;")


def test_first_error_stops_evaluation_without_rollback():
    rt = Runtime()
    with pytest.raises(ForthUnknownWord):
        rt.evaluate("1 2 + nope 10 20")
    assert rt.current_stack() == [3]
    rt.evaluate("4 +")
    assert rt.current_stack() == [7]


def test_error_inside_word_keeps_partial_progress():
    rt = Runtime()
    rt.evaluate(": f 1 2 + drop drop ;")
    with pytest.raises(ForthStackUnderflow) as info:
        rt.evaluate("f")
    assert rt.current_stack() == []
    assert info.value.forth_token == 'DROP'
    assert info.value.forth_meta['token'] == 'f'


def test_definitions_before_an_error_are_kept():
    rt = Runtime()
    with pytest.raises(ForthInvalidWord):
        rt.evaluate(": ok 1 ; : broken")
    rt.evaluate("ok")
    assert rt.current_stack() == [1]
    assert rt.lookup('broken') is None


def test_deep_doubling_chain_shares_bodies():
    rt = Runtime()
    rt.evaluate(": a 0 drop ;")
    names = "abcdefghijklmnopqrstuvwxyz"
    for prev, name in zip(names, names[1:]):
        rt.evaluate(f": {name} {prev} {prev} ;")
    assert rt.current_stack() == []

    z, y = rt.lookup('z'), rt.lookup('y')
    assert len(z.program) == 2
    assert z.program[0].ptr is y.program and z.program[1].ptr is y.program


def test_deep_linear_chain_does_not_recurse():
    rt = Runtime()
    rt.evaluate(": w0 1 ;")
    for i in range(1, 5000):
        rt.evaluate(f": w{i} w{i-1} ;")
    rt.evaluate("w4999")
    assert rt.current_stack() == [1]


def test_evaluate_accepts_raw_token_stream():
    lib = load_builtins_library()
    stack = evaluate(parse("1 2 : inc 1 + ; inc"), nil, lib)
    assert stack == nil.pushed(1, 3)
    assert lib.lookup('INC') is not None


def test_interpret_counts_steps_and_traces(capsys):
    lib = load_builtins_library()
    program = [Operation(Operation.LITERAL, 2, '2'), Operation(Operation.LITERAL, 3, '3'),
               Operation(Operation.REFERENCE, lib.lookup('+').program, '+')]
    stats = {}
    stack = interpret(program, nil, lib, verbosity=2, stats=stats)
    assert stack == nil.pushed(5)
    assert stats['steps'] == 4
    assert '<=>' in capsys.readouterr().out


def test_states():
    assert {s.name for s in State} == {'IDLE', 'AWAITING_NAME', 'CAPTURING'}
