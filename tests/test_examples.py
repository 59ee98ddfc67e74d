from pathlib import Path

from linebasic.interpreter import run_program

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def run_example(name):
    with open(EXAMPLES / name, 'r', encoding='utf-8') as f:
        source = f.read()
    return run_program(source)


def test_hello():
    result = run_example('hello.bas')
    assert result.completed
    assert result.output == ['Hello World!!']


def test_countdown():
    result = run_example('countdown.bas')
    assert result.output == ['3', '2', '1', 'liftoff']


def test_gcd():
    # gcd(1071, 462) by repeated remainders
    assert run_example('gcd.bas').output == ['21']


def test_goto_loop_sums_one_to_five():
    assert run_example('goto_loop.bas').output == ['15']


def test_nested_table_stops_at_end():
    result = run_example('table.bas')
    assert result.completed
    assert result.output == ['1', '2', '2', '4', '3', '6']
