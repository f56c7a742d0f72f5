"""
The tree-walking evaluator.

Expressions evaluate to values. Statements evaluate to a signal:
None when they complete normally, or else a Return or Break that
every enclosing statement must either forward or consume.
"""
import math, operator, sys
from typing import Optional, TextIO
from boozetools.support.foundation import Visitor
from .. import syntax
from ..diagnostics import Report
from ..environment import Environment
from ..ontology import Token
from ..preamble import install_natives
from ..resolution import Resolver
from .types import (
	VALUE, SIGNAL, Callable, Return, Break,
	RuntimeFault, OperandTypeError, UndefinedProperty, NotCallable, NotAnObject,
	ArityMismatch, InvalidSuperclass, InvalidBreakLevel,
)
from .values import Function, Class, Instance, is_truthy, is_equal, stringify

def _divide(a:float, b:float) -> float:
	try: return a / b
	except ZeroDivisionError:
		if a == 0 or math.isnan(a): return math.nan
		return math.copysign(math.inf, a) * math.copysign(1.0, b)

def _remainder(a:float, b:float) -> float:
	try: return math.fmod(a, b)
	except ValueError: return math.nan

ARITHMETIC = {
	"-": operator.sub,
	"*": operator.mul,
	"/": _divide,
	"%": _remainder,
}

COMPARISON = {
	">": operator.gt,
	">=": operator.ge,
	"<": operator.lt,
	"<=": operator.le,
}

def _to_int32(x:float) -> int:
	""" Truncate toward zero into a signed 32-bit range; NaN becomes zero and infinities saturate. """
	if math.isnan(x): return 0
	if x >= 2**31: return 2**31 - 1
	if x <= -2**31: return -2**31
	return int(x)

def _wrap32(n:int) -> int:
	n &= 0xFFFFFFFF
	return n - 2**32 if n & 0x80000000 else n

BITWISE = {
	"&": operator.and_,
	"|": operator.or_,
	"^": operator.xor,
	"<<": lambda a, b: a << (b & 31),
	">>": lambda a, b: a >> (b & 31),
}

class Interpreter(Visitor):
	"""
	One interpreter is one long-lived context: a global environment,
	the distances the resolver worked out, and somewhere to print.
	Several can coexist, which the tests rely on.
	"""
	def __init__(self, report:Report, out:Optional[TextIO]=None):
		self.report = report
		self.out = out or sys.stdout
		self.globals = Environment()
		self.distances = {}
		self._env = self.globals
		install_natives(self)

	def resolve(self, statements:list[syntax.Statement]) -> bool:
		""" Run the resolver. The distances join the rest only if nothing went wrong. """
		distances = Resolver(self.report).resolve(statements)
		if self.report.sick():
			return False
		self.distances.update(distances)
		return True

	def interpret(self, statements:list[syntax.Statement], echo:bool=False) -> bool:
		"""
		Run top-level statements in order. A fault stops the rest of them,
		but leaves the globals ready for another go. Returns True if all went well.
		With echo, a bare expression statement prints its value (unless nil), as befits a REPL.
		"""
		try:
			for stmt in statements:
				if echo and isinstance(stmt, syntax.Expression):
					value = self.evaluate(stmt.expression)
					if value is not None:
						print(stringify(value), file=self.out)
				else:
					self.execute(stmt)
		except RuntimeFault as fault:
			self._env = self.globals
			self.report.runtime_fault(fault)
			return False
		except RecursionError:
			self._env = self.globals
			self.report.stack_overflow()
			return False
		return True

	# The general machinery

	def evaluate(self, expr:syntax.ValueExpression) -> VALUE:
		return self.visit(expr)

	def execute(self, stmt:syntax.Statement) -> SIGNAL:
		return self.visit(stmt)

	def execute_block(self, statements, env:Environment) -> SIGNAL:
		previous = self._env
		self._env = env
		try:
			for stmt in statements:
				signal = self.execute(stmt)
				if signal is not None:
					return signal
			return None
		finally:
			self._env = previous

	def _look_up(self, expr:syntax.ValueExpression, name:Token) -> VALUE:
		distance = self.distances.get(expr)
		if distance is None:
			return self.globals.get(name)
		return self._env.get_at(distance, name.text)

	def _call(self, callee:VALUE, paren:Token, args:list) -> VALUE:
		if not isinstance(callee, Callable):
			raise NotCallable(paren, "Can only call functions and classes.")
		if len(args) != callee.arity():
			raise ArityMismatch(paren, "Expected %d arguments but got %d." % (callee.arity(), len(args)))
		return callee.call(self, args)

	# Statements

	def visit_Expression(self, stmt:syntax.Expression) -> SIGNAL:
		self.evaluate(stmt.expression)

	def visit_Let(self, stmt:syntax.Let) -> SIGNAL:
		value = None if stmt.initializer is None else self.evaluate(stmt.initializer)
		self._env.define(stmt.name.text, value)

	def visit_Block(self, stmt:syntax.Block) -> SIGNAL:
		return self.execute_block(stmt.statements, Environment(self._env))

	def visit_If(self, stmt:syntax.If) -> SIGNAL:
		if is_truthy(self.evaluate(stmt.condition)):
			return self.execute(stmt.then_branch)
		if stmt.else_branch is not None:
			return self.execute(stmt.else_branch)

	def visit_While(self, stmt:syntax.While) -> SIGNAL:
		while is_truthy(self.evaluate(stmt.condition)):
			signal = self.execute(stmt.body)
			if isinstance(signal, Break):
				if signal.level > 1: return Break(signal.level - 1)
				return None
			if signal is not None:
				return signal

	def visit_Break(self, stmt:syntax.Break) -> SIGNAL:
		if stmt.level is None:
			return Break(1)
		level = self.evaluate(stmt.level)
		if not isinstance(level, float) or not 0 <= level <= stmt.max_level:
			raise InvalidBreakLevel(stmt.token, "Break level must be a number from 0 to %d." % stmt.max_level)
		level = int(level)
		if level == 0:
			return None
		return Break(level)

	def visit_Return(self, stmt:syntax.Return) -> SIGNAL:
		value = None if stmt.value is None else self.evaluate(stmt.value)
		return Return(value)

	def visit_Function(self, stmt:syntax.Function) -> SIGNAL:
		self._env.define(stmt.name.text, Function(stmt, self._env))

	def visit_Class(self, stmt:syntax.Class) -> SIGNAL:
		superclass = None
		if stmt.superclass is not None:
			superclass = self.evaluate(stmt.superclass)
			if not isinstance(superclass, Class):
				raise InvalidSuperclass(stmt.superclass.name, "Superclass must be a class.")
		self._env.define(stmt.name.text, None)
		env = self._env
		if superclass is not None:
			env = Environment(env)
			env.define("super", superclass)
		methods = {
			m.name.text: Function(m, env, m.name.text == "init")
			for m in stmt.methods
		}
		static_methods = {m.name.text: Function(m, env) for m in stmt.static_methods}
		klass = Class(stmt.name.text, superclass, methods, static_methods)
		self._env.assign(stmt.name, klass)

	# Expressions

	def visit_Literal(self, expr:syntax.Literal) -> VALUE:
		return expr.value

	def visit_Grouping(self, expr:syntax.Grouping) -> VALUE:
		return self.evaluate(expr.expression)

	def visit_Variable(self, expr:syntax.Variable) -> VALUE:
		return self._look_up(expr, expr.name)

	def visit_Assign(self, expr:syntax.Assign) -> VALUE:
		value = self.evaluate(expr.value)
		distance = self.distances.get(expr)
		if distance is None:
			self.globals.assign(expr.name, value)
		else:
			self._env.assign_at(distance, expr.name.text, value)
		return value

	def visit_Lambda(self, expr:syntax.Lambda) -> VALUE:
		return Function(expr, self._env)

	def visit_Unary(self, expr:syntax.Unary) -> VALUE:
		right = self.evaluate(expr.right)
		if expr.op.kind == "!":
			return not is_truthy(right)
		assert expr.op.kind == "-", expr.op
		if not isinstance(right, float):
			raise OperandTypeError(expr.op, "Operand must be a number.")
		return -right

	def visit_Binary(self, expr:syntax.Binary) -> VALUE:
		left = self.evaluate(expr.left)
		right = self.evaluate(expr.right)
		kind = expr.op.kind
		if kind == "==": return is_equal(left, right)
		if kind == "!=": return not is_equal(left, right)
		if kind == "+":
			if isinstance(left, float) and isinstance(right, float):
				return left + right
			if isinstance(left, str) or isinstance(right, str):
				return stringify(left) + stringify(right)
			raise OperandTypeError(expr.op, "Operands must be two numbers, or else include some text.")
		if not (isinstance(left, float) and isinstance(right, float)):
			raise OperandTypeError(expr.op, "Operands must be numbers.")
		if kind in COMPARISON:
			return COMPARISON[kind](left, right)
		return ARITHMETIC[kind](left, right)

	def visit_Bitwise(self, expr:syntax.Bitwise) -> VALUE:
		left = self.evaluate(expr.left)
		right = self.evaluate(expr.right)
		if not (isinstance(left, float) and isinstance(right, float)):
			raise OperandTypeError(expr.op, "Operands must be numbers.")
		result = BITWISE[expr.op.kind](_to_int32(left), _to_int32(right))
		return float(_wrap32(result))

	def visit_Logical(self, expr:syntax.Logical) -> VALUE:
		left = self.evaluate(expr.left)
		if expr.op.kind == "OR":
			if is_truthy(left): return left
		else:
			if not is_truthy(left): return left
		return self.evaluate(expr.right)

	def visit_Ternary(self, expr:syntax.Ternary) -> VALUE:
		if is_truthy(self.evaluate(expr.condition)):
			return self.evaluate(expr.middle)
		return self.evaluate(expr.right)

	def visit_Call(self, expr:syntax.Call) -> VALUE:
		callee = self.evaluate(expr.callee)
		args = [self.evaluate(a) for a in expr.arguments]
		return self._call(callee, expr.paren, args)

	def visit_Get(self, expr:syntax.Get) -> VALUE:
		subject = self.evaluate(expr.subject)
		if not isinstance(subject, Instance):
			raise NotAnObject(expr.name, "Only instances have properties.")
		try: return subject.get(expr.name.text)
		except KeyError:
			raise UndefinedProperty(expr.name, "Undefined property '%s'." % expr.name.text) from None

	def visit_Set(self, expr:syntax.Set) -> VALUE:
		subject = self.evaluate(expr.subject)
		if not isinstance(subject, Instance):
			raise NotAnObject(expr.name, "Only instances have fields.")
		value = self.evaluate(expr.value)
		subject.set(expr.name.text, value)
		return value

	def visit_This(self, expr:syntax.This) -> VALUE:
		return self._look_up(expr, expr.keyword)

	def visit_Super(self, expr:syntax.Super) -> VALUE:
		distance = self.distances[expr]
		superclass = self._env.get_at(distance, "super")
		receiver = self._env.get_at(distance - 1, "this")
		method = superclass.find_method(receiver, expr.method.text)
		if method is None:
			raise UndefinedProperty(expr.method, "Undefined property '%s'." % expr.method.text)
		return method
