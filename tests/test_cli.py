import json

import pytest

from linebasic.__main__ import main


def write_program(tmp_path, source, name='prog.bas'):
    path = tmp_path / name
    path.write_text(source, encoding='utf-8')
    return path


def test_runs_program_file(tmp_path, capsys):
    path = write_program(tmp_path, '10 LET X = 2\n20 PRINT X\n30 PRINT "done"\n')
    main([str(path)])
    assert capsys.readouterr().out == '2\ndone\n'


def test_aborted_run_exits_with_error(tmp_path, capsys):
    path = write_program(tmp_path, '10 PRINT "start"\n20 GOTO 70\n')
    with pytest.raises(SystemExit) as excinfo:
        main([str(path)])
    assert excinfo.value.code == 1
    captured = capsys.readouterr()
    assert captured.out == 'start\n'
    assert 'Runtime error: InvalidJumpError at line 20' in captured.err


def test_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([str(tmp_path / 'nope.bas')])
    assert excinfo.value.code == 1
    assert 'not found' in capsys.readouterr().err


def test_malformed_listing(tmp_path, capsys):
    path = write_program(tmp_path, 'PRINT "no number"\n')
    with pytest.raises(SystemExit):
        main([str(path)])
    assert 'invalid program line' in capsys.readouterr().err


def test_max_steps_flag(tmp_path, capsys):
    path = write_program(tmp_path, '10 GOTO 10\n')
    with pytest.raises(SystemExit):
        main(['--max-steps', '10', str(path)])
    assert 'StepLimitError' in capsys.readouterr().err


def test_verbose_run_writes_debug_file(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    path = write_program(tmp_path, '10 PRINT "hi"\n')
    main(['-v', str(path)])
    assert capsys.readouterr().out == 'hi\n'
    assert 'Executing line 10' in (tmp_path / 'debug.txt').read_text(encoding='utf-8')


def test_emit_ast(tmp_path, capsys):
    path = write_program(tmp_path, '20 GOTO 10\n10 LET X = 1 + 2\n')
    main(['--emit-ast', str(path)])
    out_path = tmp_path / 'prog.bas.ast.json'
    assert capsys.readouterr().out.strip() == str(out_path)
    data = json.loads(out_path.read_text(encoding='utf-8'))
    assert [entry['line'] for entry in data] == [10, 20]
    assert data[0]['statement'] == {
        'type': 'LetStmt',
        'name': 'X',
        'expr': {
            'type': 'Expr',
            'first': {'type': 'Number', 'value': 1.0},
            'rest': [{'op': '+', 'operand': {'type': 'Number', 'value': 2.0}}],
        },
        'explicit': True,
    }
    assert data[1]['statement'] == {'type': 'GotoStmt', 'target': 10}


def test_emit_ast_reports_parse_errors(tmp_path, capsys):
    path = write_program(tmp_path, '10 PRINT 5\n')
    with pytest.raises(SystemExit):
        main(['--emit-ast', str(path)])
    assert 'SyntaxError at line 10' in capsys.readouterr().err


def test_missing_program_argument():
    with pytest.raises(SystemExit) as excinfo:
        main([])
    assert excinfo.value.code == 2
