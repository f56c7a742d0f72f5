import io
import math
import unittest

from glint import syntax
from glint.diagnostics import Report
from glint.environment import Environment
from glint.ontology import Token
from glint.tree_walker.evaluator import Interpreter, _to_int32, _wrap32
from glint.tree_walker.types import UndefinedVariable, Return, Break
from glint.tree_walker.values import Class, Function, Instance, is_equal, is_truthy, stringify

def _name(text):
	return Token("name", text, None, 1, 1)

class EnvironmentTests(unittest.TestCase):

	def test_define_overwrites_in_same_scope(self):
		env = Environment()
		env.define("a", 1.0)
		env.define("a", 2.0)
		self.assertEqual(2.0, env.get(_name("a")))

	def test_get_walks_outward(self):
		outer = Environment()
		outer.define("a", "outer")
		inner = Environment(Environment(outer))
		self.assertEqual("outer", inner.get(_name("a")))

	def test_get_missing(self):
		with self.assertRaises(UndefinedVariable) as cm:
			Environment(Environment()).get(_name("ghost"))
		self.assertEqual("ghost", cm.exception.token.text)

	def test_assign_writes_where_found(self):
		outer = Environment()
		outer.define("a", 1.0)
		inner = Environment(outer)
		inner.assign(_name("a"), 5.0)
		self.assertEqual(5.0, outer.values["a"])
		self.assertNotIn("a", inner.values)

	def test_assign_never_creates(self):
		env = Environment()
		with self.assertRaises(UndefinedVariable):
			env.assign(_name("nope"), 1.0)
		self.assertEqual({}, env.values)

	def test_get_at_skips_nearer_bindings(self):
		outer = Environment()
		outer.define("a", "far")
		middle = Environment(outer)
		middle.define("a", "near")
		inner = Environment(middle)
		self.assertEqual("far", inner.get_at(2, "a"))
		self.assertEqual("near", inner.get_at(1, "a"))
		inner.assign_at(2, "a", "changed")
		self.assertEqual("changed", outer.values["a"])
		self.assertEqual("near", middle.values["a"])

	def test_assign_at_insists_name_is_present(self):
		env = Environment(Environment())
		with self.assertRaises(AssertionError):
			env.assign_at(1, "missing", 1.0)

	def test_ancestor(self):
		root = Environment()
		leaf = Environment(Environment(root))
		self.assertIs(root, leaf.ancestor(2))
		self.assertIs(leaf, leaf.ancestor(0))

class Values(unittest.TestCase):

	def test_truthiness(self):
		for value, expect in [(None, False), (False, False), (True, True), (0.0, True), ("", True)]:
			with self.subTest(value=value):
				self.assertIs(expect, is_truthy(value))

	def test_equality(self):
		self.assertTrue(is_equal(None, None))
		self.assertFalse(is_equal(None, False))
		self.assertFalse(is_equal(False, None))
		self.assertFalse(is_equal(0.0, "0"))
		self.assertFalse(is_equal(1.0, True))
		self.assertTrue(is_equal("x", "x"))

	def test_stringify_numbers(self):
		self.assertEqual("3", stringify(3.0))
		self.assertEqual("-0", stringify(-0.0))
		self.assertEqual("0.1", stringify(0.1))
		self.assertEqual("Infinity", stringify(math.inf))
		self.assertEqual("-Infinity", stringify(-math.inf))
		self.assertEqual("NaN", stringify(math.nan))

	def test_int32_conversion(self):
		self.assertEqual(3, _to_int32(3.99))
		self.assertEqual(-3, _to_int32(-3.99))
		self.assertEqual(0, _to_int32(math.nan))
		self.assertEqual(2**31 - 1, _to_int32(math.inf))
		self.assertEqual(-2**31, _to_int32(-1e20))
		self.assertEqual(-1, _wrap32(0xFFFFFFFF))
		self.assertEqual(0, _wrap32(2**32))

	def test_signals_are_plain_data(self):
		self.assertEqual(Break(2), Break(2))
		self.assertEqual(3.0, Return(3.0).value)

class ObjectModel(unittest.TestCase):

	def setUp(self):
		self.interpreter = Interpreter(Report(console=io.StringIO()), out=io.StringIO())

	def _method(self, name, params=(), body=()):
		return syntax.Function(_name(name), [_name(p) for p in params], list(body))

	def test_bind_makes_a_fresh_function(self):
		fn = Function(self._method("m"), self.interpreter.globals)
		a, b = Instance(None), Instance(None)
		bound_a, bound_b = fn.bind(a), fn.bind(b)
		self.assertIsNot(bound_a, bound_b)
		self.assertIs(a, bound_a.closure.get_at(0, "this"))
		self.assertIs(b, bound_b.closure.get_at(0, "this"))
		self.assertIs(self.interpreter.globals, bound_a.closure.enclosing)

	def test_find_method_walks_the_chain(self):
		env = self.interpreter.globals
		base = Class("Base", None, {"m": Function(self._method("m"), env)}, {})
		derived = Class("Derived", base, {}, {})
		instance = Instance(derived)
		found = derived.find_method(instance, "m")
		self.assertIsInstance(found, Function)
		self.assertIs(instance, found.closure.get_at(0, "this"))
		self.assertIsNone(derived.find_method(instance, "nothing"))

	def test_class_arity_follows_init(self):
		env = self.interpreter.globals
		base = Class("Base", None, {"init": Function(self._method("init", ["a", "b"]), env, True)}, {})
		self.assertEqual(2, base.arity())
		self.assertEqual(2, Class("Derived", base, {}, {}).arity())
		self.assertEqual(0, Class("Plain", None, {}, {}).arity())

	def test_construction_runs_init(self):
		env = self.interpreter.globals
		# init(v) { this.v = v; }
		this = syntax.This(Token("THIS", "this", None, 1, 1))
		body = [syntax.Expression(syntax.Set(this, _name("v"), syntax.Variable(_name("v"))))]
		self.interpreter.distances[this] = 1
		self.interpreter.distances[body[0].expression.value] = 0
		init = Function(self._method("init", ["v"], body), env, True)
		klass = Class("Box", None, {"init": init}, {})
		instance = klass.call(self.interpreter, [7.0])
		self.assertIs(klass, instance.klass)
		self.assertEqual({"v": 7.0}, instance.fields)

	def test_metaclass_chain(self):
		env = self.interpreter.globals
		base = Class("Base", None, {}, {"make": Function(self._method("make"), env)})
		derived = Class("Derived", base, {}, {})
		self.assertIs(base.metaclass, derived.metaclass.superclass)
		self.assertIsNone(base.metaclass.klass)
		made = derived.get("make")
		self.assertIs(derived, made.closure.get_at(0, "this"))

	def test_fields_shadow_methods(self):
		env = self.interpreter.globals
		klass = Class("K", None, {"m": Function(self._method("m"), env)}, {})
		instance = Instance(klass)
		self.assertIsInstance(instance.get("m"), Function)
		instance.set("m", 1.0)
		self.assertEqual(1.0, instance.get("m"))
		with self.assertRaises(KeyError):
			instance.get("other")

	def test_display(self):
		klass = Class("K", None, {}, {})
		self.assertEqual("K", stringify(klass))
		self.assertEqual("K instance", stringify(Instance(klass)))
		self.assertEqual("<fun m>", stringify(Function(self._method("m"), self.interpreter.globals)))

if __name__ == '__main__':
	unittest.main()
