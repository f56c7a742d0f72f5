"""
This is an interpreter for the Glint programming language.

{0}

For example:

    glint program.glint

will run program.glint if possible, or else try to explain why not.

    glint

with no program starts an interactive session.

    glint -h

will explain all the arguments.
"""
import sys, argparse
from pathlib import Path

# Exit codes, in the BSD sysexits tradition:
EX_USAGE = 64
EX_DATAERR = 65
EX_SOFTWARE = 70

# Glint recursion rides on Python recursion, several frames per call.
RECURSION_LIMIT = 20_000

parser = argparse.ArgumentParser(
	prog="glint",
	description="Interpreter for the Glint programming language.",
)
parser.add_argument("program", nargs="?", help="try examples/classes.glint for example.")
parser.add_argument('-c', "--check", action="store_true", help="Check the program verbosely but do not actually execute the program.")
parser.add_argument('-v', "--verbose", action="count", default=0, help="Mention each phase as it finishes.")

def run(args) -> int:
	from .diagnostics import Report, TooManyIssues
	from .executive import prepare_file
	from .resolution import Yuck
	from .tree_walker.evaluator import Interpreter
	report = Report(verbose=args.verbose + args.check)
	interpreter = Interpreter(report)
	try:
		try: statements = prepare_file(Path.cwd() / args.program, interpreter)
		except Yuck as yuck:
			assert report.sick()
			report.info("Trouble in the %s phase." % yuck.args[0])
			report.complain_to_console()
			return EX_USAGE if yuck.args[0] == "read" else EX_DATAERR
	except TooManyIssues:
		report.complain_to_console()
		print(" *"*35, file=sys.stderr)
		print("Giving up after a few issues. One crisis at a time, eh?", file=sys.stderr)
		return EX_DATAERR
	if args.check:
		print("Looks plausible to me.", file=sys.stderr)
		return 0
	try: ok = interpreter.interpret(statements)
	except AssertionError as ex:
		report.failed_assertion(str(ex))
		return EX_SOFTWARE
	return 0 if ok else EX_SOFTWARE

def repl(args) -> int:
	"""
	Each line is its own little program, but they all share one interpreter,
	so definitions persist from one line to the next.
	"""
	from .diagnostics import Report, TooManyIssues
	from .executive import run_text
	from .resolution import Yuck
	from .tree_walker.evaluator import Interpreter
	report = Report(verbose=args.verbose)
	interpreter = Interpreter(report)
	while True:
		try: line = input("> ")
		except EOFError:
			print()
			return 0
		report.reset()
		try: run_text(line, interpreter, label="<stdin>", echo=True)
		except (Yuck, TooManyIssues):
			report.complain_to_console()
		except AssertionError as ex:
			report.failed_assertion(str(ex))

def main():
	try: args = parser.parse_args()
	except SystemExit as ex:
		# argparse says 2 for a usage error.
		sys.exit(EX_USAGE if ex.code == 2 else ex.code)
	sys.setrecursionlimit(max(sys.getrecursionlimit(), RECURSION_LIMIT))
	if args.program is None:
		if args.check:
			parser.print_usage(sys.stderr)
			sys.exit(EX_USAGE)
		print(__doc__.strip().format(parser.format_usage()))
		sys.exit(repl(args))
	sys.exit(run(args))
