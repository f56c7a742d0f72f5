"""
Overall control: from text to a prepared program, and from there to a run.
Each phase that finds trouble raises Yuck with the name of that phase.
"""
from pathlib import Path
from typing import Optional
from . import syntax
from .diagnostics import Report
from .front_end import scan_text, parse_tokens
from .location import Segment
from .resolution import Yuck
from .tree_walker.evaluator import Interpreter

def read_source(path:Path, report:Report) -> str:
	report.info("Loading", path)
	try:
		with open(path, "r", encoding="utf-8") as fh:
			return fh.read()
	except FileNotFoundError:
		report.no_such_file(path)
	except OSError:
		report.broken_file(path)
	raise Yuck("read")

def prepare(text:str, interpreter:Interpreter, path:Optional[Path]=None, label:str="<input>") -> list[syntax.Statement]:
	report = interpreter.report
	tokens = scan_text(Segment(text, path, label), report)
	if report.sick(): raise Yuck("scan")
	statements = parse_tokens(tokens, report)
	if report.sick(): raise Yuck("parse")
	report.info("Parsed %d top-level statements from %s." % (len(statements), label))
	if not interpreter.resolve(statements): raise Yuck("resolve")
	report.info("Resolved %d local references so far." % len(interpreter.distances))
	return statements

def prepare_file(path:Path, interpreter:Interpreter) -> list[syntax.Statement]:
	text = read_source(path, interpreter.report)
	return prepare(text, interpreter, path=path)

def run_text(text:str, interpreter:Interpreter, path:Optional[Path]=None, label:str="<input>", echo:bool=False) -> bool:
	""" Prepare and run. Returns whether the program ran without a fault. """
	statements = prepare(text, interpreter, path=path, label=label)
	return interpreter.interpret(statements, echo=echo)

def run_file(path:Path, interpreter:Interpreter) -> bool:
	return interpreter.interpret(prepare_file(path, interpreter))
