import builtins

import pytest

from linebasic.errors import BasicArithmeticError, BasicSyntaxError, InvalidJumpError
from linebasic.flow import ADVANCE, TERMINATE, JumpTo
from linebasic.interpreter import Interpreter, RunContext


def execute(program, line_number, interp=None, **variables):
    ctx = RunContext.for_program(program)
    for name, value in variables.items():
        ctx.symbols.set(name, value)
    directive = (interp or Interpreter()).execute_line(line_number, ctx)
    return directive, ctx


@pytest.mark.parametrize('literal, expected', [('0', 0.0), ('7', 7.0), ('3.25', 3.25), ('1000000', 1e6)])
def test_let_stores_number_literals(literal, expected):
    directive, ctx = execute({10: f'LET X = {literal}'}, 10)
    assert directive == ADVANCE
    assert ctx.symbols.snapshot() == {'X': expected}


def test_assignment_keeps_exact_case_name():
    _, ctx = execute({10: 'total = 2 + 3 * 4'}, 10)
    assert ctx.symbols.snapshot() == {'total': 20.0}


def test_failed_assignment_leaves_the_variable_untouched():
    ctx = RunContext.for_program({10: 'LET X = X / 0'})
    ctx.symbols.set('X', 5.0)
    with pytest.raises(BasicArithmeticError):
        Interpreter().execute_line(10, ctx)
    assert ctx.symbols.get('X') == 5.0


def test_print_string_literal():
    directive, ctx = execute({10: 'PRINT "Hello"'}, 10)
    assert directive == ADVANCE
    assert ctx.output == ['Hello']


def test_print_variable_formats_integral_values_without_fraction():
    _, ctx = execute({10: 'PRINT X'}, 10, X=3.0)
    assert ctx.output == ['3']
    _, ctx = execute({10: 'PRINT X'}, 10, X=2.5)
    assert ctx.output == ['2.5']


@pytest.mark.parametrize('value, expected', [
    (123456789012345.0, '123456789012345'),
    (9999999999999998.0, '9999999999999998'),
    (1e16, '1e+16'),
    (-1e16, '-1e+16'),
    (1e300, '1e+300'),
])
def test_print_large_magnitudes_stay_readable(value, expected):
    _, ctx = execute({10: 'PRINT X'}, 10, X=value)
    assert ctx.output == [expected]


def test_print_undefined_variable_emits_diagnostic_instead_of_failing():
    directive, ctx = execute({10: 'PRINT Missing'}, 10)
    assert directive == ADVANCE
    assert ctx.output == ['Undefined variable: Missing']


def test_if_true_jumps_without_validating_target():
    directive, _ = execute({10: 'IF 1 < 2 THEN 100'}, 10)
    assert directive == JumpTo(100)


def test_if_false_advances():
    directive, _ = execute({10: 'IF 2 < 1 THEN 100'}, 10)
    assert directive == ADVANCE


def test_if_false_takes_else_branch():
    directive, _ = execute({10: 'IF X = 1 THEN 100 ELSE 200'}, 10, X=2.0)
    assert directive == JumpTo(200)


def test_goto_existing_line():
    directive, _ = execute({10: 'GOTO 30', 30: 'END'}, 10)
    assert directive == JumpTo(30)


def test_goto_missing_line_raises():
    with pytest.raises(InvalidJumpError):
        execute({10: 'GOTO 99'}, 10)


def test_end_terminates():
    directive, _ = execute({10: 'END', 20: 'PRINT "after"'}, 10)
    assert directive == TERMINATE


def test_rem_does_nothing():
    directive, ctx = execute({10: 'REM nothing to see'}, 10)
    assert directive == ADVANCE
    assert ctx.output == []
    assert len(ctx.symbols) == 0


def test_input_uses_configured_reader():
    prompts = []

    def reader(prompt):
        prompts.append(prompt)
        return ' 42 '

    _, ctx = execute({10: 'INPUT N'}, 10, Interpreter(input_fn=reader))
    assert ctx.symbols.get('N') == 42.0
    assert prompts == ['? ']


def test_input_defaults_to_builtin_input(monkeypatch):
    monkeypatch.setattr(builtins, 'input', lambda prompt='': '2.5')
    _, ctx = execute({10: 'INPUT N'}, 10)
    assert ctx.symbols.get('N') == 2.5


def test_input_at_end_of_input_reads_zero():
    def reader(prompt):
        raise EOFError

    _, ctx = execute({10: 'INPUT N'}, 10, Interpreter(input_fn=reader))
    assert ctx.symbols.get('N') == 0.0


def test_input_rejects_non_numeric_reply():
    with pytest.raises(BasicSyntaxError):
        execute({10: 'INPUT N'}, 10, Interpreter(input_fn=lambda prompt: 'ten'))


def test_statements_are_parsed_once_per_run():
    ctx = RunContext.for_program({10: 'LET X = 1'})
    interp = Interpreter()
    interp.execute_line(10, ctx)
    cached = ctx.statements[10]
    interp.execute_line(10, ctx)
    assert ctx.statements[10] is cached
