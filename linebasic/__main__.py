"""CLI entry point for the linebasic interpreter.

Usage:
    python -m linebasic [-v|-vv|-vvv] [--max-steps N] <program_file>
    python -m linebasic [-v...] --emit-ast <program_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --max-steps   Abort the run after N executed lines
  --emit-ast    Parse the given program and emit an AST JSON file

Program files are plain text listings with one `<number> <code>` pair
per line. Debug information is written to `debug.txt` in the current
directory when verbosity is greater than zero.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from .ast_json import program_to_obj
from .errors import BasicError
from .interpreter import Interpreter
from .program import Program


def load_program(path: Path) -> Program:
    with open(path, 'r', encoding='utf-8') as f:
        source = f.read()
    try:
        return Program.from_listing(source)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def main(argv: Optional[list] = None) -> None:
    parser = argparse.ArgumentParser(description="Line-numbered BASIC interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--max-steps', type=int, default=None, metavar='N',
                        help='abort the run after N executed lines')
    parser.add_argument('--emit-ast', metavar='PROGRAM_FILE', help='emit AST JSON for the given program file')
    parser.add_argument('program', nargs='?', help='BASIC program file to run')
    args = parser.parse_args(argv)

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        if not program_file.exists():
            print(f"Error: file {program_file} not found", file=sys.stderr)
            sys.exit(1)
        program = load_program(program_file)
        try:
            obj = program_to_obj(program)
        except BasicError as e:
            print(f"Runtime error: {e}", file=sys.stderr)
            sys.exit(1)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(obj, out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Default: run program file
    if not args.program:
        parser.error('missing program file; or use --emit-ast')
    program_file = Path(args.program)
    if not program_file.exists():
        print(f"Error: file {program_file} not found", file=sys.stderr)
        sys.exit(1)
    program = load_program(program_file)
    interpreter = Interpreter(debug_level=args.v, debug_file='debug.txt', max_steps=args.max_steps)
    result = interpreter.run(program)
    for line in result.output:
        print(line)
    if not result.completed:
        print(f"Runtime error: {result.status}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
