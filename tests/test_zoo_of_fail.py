import io
from pathlib import Path
import unittest
from unittest import mock

from glint.diagnostics import Report
from glint.executive import prepare
from glint.resolution import Yuck
from glint.tree_walker.evaluator import Interpreter
from glint.tree_walker import types

class Silence(Report):
	def __init__(self):
		super().__init__(verbose=False, max_issues=30, console=io.StringIO())
		self.complain_to_console = mock.Mock()
	pass

base_folder = Path(__file__).parent.parent
zoo_fail = base_folder/"zoo/fail"

def _identify_problem(specimen_path:Path):
	assert specimen_path.exists(), specimen_path
	report = Silence()
	interpreter = Interpreter(report, out=io.StringIO())
	try:
		statements = prepare(specimen_path.read_text(), interpreter, path=specimen_path)
	except Yuck as ex:
		assert 0 == report.complain_to_console.call_count
		assert report.sick()
		return ex.args[0], report
	else:
		report.assert_no_issues()
		if interpreter.interpret(statements): return "failed to fail", report
		return "runtime", report

class ZooOfFail(unittest.TestCase):
	""" Tests that assert about failure modes. """

	def expect(self, folder, cases):
		for basename in cases:
			with self.subTest(basename):
				phase, report = _identify_problem(zoo_fail / folder / (basename + ".glint"))
				self.assertEqual(folder, phase)

	def test_00_scan(self):
		self.expect("scan", [
			"bad_character",
			"bad_escape",
			"bad_unicode_escape",
			"unterminated_comment",
			"unterminated_string",
		])

	def test_01_parse(self):
		self.expect("parse", [
			"break_in_function_in_loop",
			"break_outside_loop",
			"break_too_deep",
			"invalid_assignment_target",
			"missing_expression",
			"missing_semicolon",
			"static_without_method",
			"unclosed_block",
		])

	def test_02_resolve(self):
		self.expect("resolve", [
			"inherits_from_itself",
			"own_initializer",
			"return_from_top_level",
			"return_value_from_init",
			"super_outside_class",
			"super_without_superclass",
			"this_outside_class",
		])

	def test_03_runtime(self):
		cases = {
			"arity_mismatch": types.ArityMismatch,
			"assign_undefined": types.UndefinedVariable,
			"bad_addition": types.OperandTypeError,
			"bad_bitwise": types.OperandTypeError,
			"bad_comparison": types.OperandTypeError,
			"bad_negation": types.OperandTypeError,
			"bad_operands": types.OperandTypeError,
			"class_arity": types.ArityMismatch,
			"invalid_break_level": types.InvalidBreakLevel,
			"invalid_superclass": types.InvalidSuperclass,
			"negative_break_level": types.InvalidBreakLevel,
			"non_numeric_break_level": types.InvalidBreakLevel,
			"not_an_object": types.NotAnObject,
			"not_callable": types.NotCallable,
			"set_on_non_object": types.NotAnObject,
			"undefined_property": types.UndefinedProperty,
			"undefined_super_method": types.UndefinedProperty,
			"undefined_variable": types.UndefinedVariable,
		}
		for basename, fault_class in cases.items():
			with self.subTest(basename):
				phase, report = _identify_problem(zoo_fail / "runtime" / (basename + ".glint"))
				self.assertEqual("runtime", phase)
				self.assertTrue(report.had_runtime_error)
				self.assertEqual(1, len(report.faults))
				self.assertIs(fault_class, type(report.faults[0]))

	def test_every_specimen_is_listed(self):
		""" A specimen nobody checks is a specimen nobody needs. """
		listed = {
			"scan": 5, "parse": 8, "resolve": 7, "runtime": 18,
		}
		for folder, count in listed.items():
			with self.subTest(folder):
				self.assertEqual(count, len(list((zoo_fail/folder).glob("*.glint"))))

class Diagnostics(unittest.TestCase):
	""" The report says what went wrong and where. """

	def test_fault_names_line_and_column(self):
		console = io.StringIO()
		report = Report(console=console)
		interpreter = Interpreter(report, out=io.StringIO())
		statements = prepare("let a = 1;\nlet b = a - nil;", interpreter)
		self.assertFalse(interpreter.interpret(statements))
		fault = report.faults[0]
		self.assertEqual((2, 11), (fault.token.line, fault.token.column))
		text = console.getvalue()
		self.assertIn("Operands must be numbers.", text)
		self.assertIn("[line 2:11]", text)

	def test_parse_error_mentions_culprit(self):
		report = Silence()
		interpreter = Interpreter(report, out=io.StringIO())
		with self.assertRaises(Yuck):
			prepare("let 5 = x;", interpreter)
		self.assertEqual("Glint got confused by '5'.", report.issues[0].intro)

	def test_parse_error_at_end(self):
		report = Silence()
		interpreter = Interpreter(report, out=io.StringIO())
		with self.assertRaises(Yuck):
			prepare("let x = 1", interpreter)
		self.assertTrue(report.issues[0].intro.startswith("Glint ran out of words"))

	def test_parser_recovers_to_find_more(self):
		report = Silence()
		interpreter = Interpreter(report, out=io.StringIO())
		with self.assertRaises(Yuck):
			prepare("let = 1;\nlet y = ;\nprintln(2);", interpreter)
		self.assertEqual(2, len(report.issues))

	def test_scanner_reports_every_bad_character(self):
		report = Silence()
		interpreter = Interpreter(report, out=io.StringIO())
		with self.assertRaises(Yuck) as cm:
			prepare("let a = @;\nlet b = #;", interpreter)
		self.assertEqual("scan", cm.exception.args[0])
		self.assertEqual(2, len(report.issues))

	def test_too_many_issues(self):
		from glint.diagnostics import TooManyIssues
		report = Report(max_issues=3, console=io.StringIO())
		interpreter = Interpreter(report, out=io.StringIO())
		with self.assertRaises(TooManyIssues):
			prepare("@ @ @ @ @", interpreter)

	def test_pictures_render(self):
		report = Silence()
		interpreter = Interpreter(report, out=io.StringIO())
		with self.assertRaises(Yuck):
			prepare("class A { m() { return super.m(); } }", interpreter)
		text = report.issues[0].as_text()
		self.assertIn("super", text)
		self.assertIn("<input>", text)

if __name__ == '__main__':
	unittest.main()
