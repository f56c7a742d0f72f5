import io
import unittest

from glint import syntax
from glint.diagnostics import Report
from glint.front_end import parse_text
from glint.resolution import Resolver, TopDown

def _parse(text):
	report = Report(console=io.StringIO())
	statements = parse_text(text, report)
	report.assert_no_issues("Test program should parse.")
	return statements, report

class Collect(TopDown):
	""" Gathers every node of a given class, in walk order. """
	def __init__(self, kind):
		self.kind = kind
		self.found = []
	def visit(self, host, *args):
		if isinstance(host, self.kind): self.found.append(host)
		return super().visit(host, *args)
	def visit_Variable(self, expr): pass
	def visit_Assign(self, expr): self.visit(expr.value)
	def visit_This(self, expr): pass
	def visit_Super(self, expr): pass
	def visit_Lambda(self, expr):
		for s in expr.body: self.visit(s)
	def visit_Block(self, stmt):
		for s in stmt.statements: self.visit(s)
	def visit_Let(self, stmt):
		if stmt.initializer is not None: self.visit(stmt.initializer)
	def visit_Return(self, stmt):
		if stmt.value is not None: self.visit(stmt.value)
	def visit_Function(self, stmt):
		for s in stmt.body: self.visit(s)
	def visit_Class(self, stmt):
		for m in stmt.methods + stmt.static_methods: self.visit(m)

def _find(statements, kind):
	collector = Collect(kind)
	for stmt in statements: collector.visit(stmt)
	return collector.found

class Distances(unittest.TestCase):

	def test_globals_are_left_unresolved(self):
		statements, report = _parse("let a = 1; a = a + 1; fun f() { return a; }")
		distances = Resolver(report).resolve(statements)
		self.assertEqual({}, distances)

	def test_locals_get_distances(self):
		statements, report = _parse("""
			fun outer(a) {
				let b = a;
				return \\c -> a + b + c;
			}
		""")
		distances = Resolver(report).resolve(statements)
		by_name = {v.name.text: distances[v] for v in _find(statements, syntax.Variable)}
		self.assertEqual({"a": 1, "b": 1, "c": 0}, by_name)

	def test_block_adds_a_hop(self):
		statements, report = _parse("{ let x = 1; { { x = 2; } } }")
		distances = Resolver(report).resolve(statements)
		[assign] = [e for e in distances if isinstance(e, syntax.Assign)]
		self.assertEqual(2, distances[assign])

	def test_super_is_one_hop_beyond_this(self):
		statements, report = _parse("""
			class A { m() { return 1; } }
			class B < A {
				m() { let x = this; return super.m(); }
				static s() { return super.s; }
			}
		""")
		distances = Resolver(report).resolve(statements)
		[this] = _find_all(distances, syntax.This)
		supers = _find_all(distances, syntax.Super)
		self.assertEqual(2, len(supers))
		# `this` from within the method body's own block:
		self.assertEqual(1, distances[this])
		for s in supers:
			self.assertEqual(2, distances[s])

	def test_resolution_is_deterministic(self):
		text = """
			let g = 0;
			class Base { init(n) { this.n = n; } get() { return this.n; } }
			class Derived < Base { get() { return super.get() + g; } }
			fun make(k) {
				let total = 0;
				for (let i = 0; i < k; i += 1) {
					let f = \\ -> i + total;
					total += f();
				}
				return total;
			}
		"""
		statements, _ = _parse(text)
		first = Resolver(Report(console=io.StringIO())).resolve(statements)
		second = Resolver(Report(console=io.StringIO())).resolve(statements)
		self.assertTrue(first)
		self.assertEqual(first, second)
		self.assertEqual(list(first.items()), list(second.items()))

	def test_errors_are_all_collected(self):
		report = Report(max_issues=10, console=io.StringIO())
		statements = parse_text("fun f() { return this; } return 1;", report)
		self.assertTrue(report.ok())
		Resolver(report).resolve(statements)
		self.assertTrue(report.sick())
		self.assertEqual(2, len(report.issues))

	def test_own_initializer_only_matters_in_local_scope(self):
		report = Report(console=io.StringIO())
		statements = parse_text("let a = a; { let b = 1; { let b = b; } }", report)
		Resolver(report).resolve(statements)
		self.assertEqual(1, len(report.issues))
		self.assertIn("own initializer", report.issues[0].intro)

	def test_return_without_value_in_initializer_is_fine(self):
		report = Report(console=io.StringIO())
		statements = parse_text("class A { init() { return; } }", report)
		Resolver(report).resolve(statements)
		self.assertTrue(report.ok())

	def test_this_in_nested_function_inside_method(self):
		report = Report(console=io.StringIO())
		statements = parse_text("class A { m() { return \\ -> this; } }", report)
		distances = Resolver(report).resolve(statements)
		[this] = _find_all(distances, syntax.This)
		# lambda scope, method scope, then the scope holding `this`.
		self.assertEqual(2, distances[this])

def _find_all(distances, kind):
	return [e for e in distances if isinstance(e, kind)]

if __name__ == '__main__':
	unittest.main()
