import pytest

from linebasic.program import Program, parse_listing


def test_lines_iterate_in_ascending_order():
    program = Program()
    program.set_line(30, 'END')
    program.set_line(10, 'LET X = 1')
    program.set_line(20, 'PRINT X')
    assert list(program) == [10, 20, 30]
    assert program[20] == 'PRINT X'
    assert len(program) == 3


def test_set_line_replaces_existing_line():
    program = Program([(10, 'PRINT "a"')])
    program.set_line(10, 'PRINT "b"')
    assert dict(program) == {10: 'PRINT "b"'}


def test_blank_text_deletes_line():
    program = Program([(10, 'PRINT "a"'), (20, 'END')])
    program.set_line(10, '   ')
    assert list(program) == [20]
    program.delete_line(20)
    program.delete_line(99)
    assert len(program) == 0


@pytest.mark.parametrize('number', [0, -5, 1.5, '10', True])
def test_line_numbers_must_be_positive_integers(number):
    with pytest.raises(ValueError):
        Program().set_line(number, 'END')


def test_listing_round_trip():
    source = '10 LET X = 1\n20 PRINT X\n'
    program = Program.from_listing(source)
    assert dict(program) == {10: 'LET X = 1', 20: 'PRINT X'}
    assert program.to_listing() == source


def test_listing_is_sorted_and_later_duplicates_win():
    program = Program.from_listing('20 PRINT "b"\n\n10 PRINT "a"\n20 PRINT "c"\n')
    assert program.to_listing() == '10 PRINT "a"\n20 PRINT "c"\n'


def test_parse_listing_rejects_lines_without_number():
    with pytest.raises(ValueError) as excinfo:
        parse_listing('10 PRINT "a"\nPRINT "b"\n')
    assert 'PRINT "b"' in str(excinfo.value)
