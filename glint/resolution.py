"""
The static pass between parsing and running.

For every variable reference (including `this` and `super`) that names a
local, work out how many scopes out the binding lives. References with no
local binding are left alone; the run-time looks those up in globals.

Along the way, complain about things that can be known wrong in advance:
reading a local in its own initializer, `this` or `super` in the wrong
place, and `return` where it makes no sense.
"""
from enum import Enum
from boozetools.support.foundation import Visitor
from . import syntax
from .diagnostics import Report
from .ontology import Token

class Yuck(Exception):
	"""
	The first argument will be the name of the pass fraught with error.
	The end-user might not care about this, but it's handy for testing.
	"""
	pass

class FunctionKind(Enum):
	NONE = "none"
	FUNCTION = "function"
	INITIALIZER = "initializer"
	METHOD = "method"

class ClassKind(Enum):
	NONE = "none"
	CLASS = "class"
	SUBCLASS = "subclass"

class TopDown(Visitor):
	"""
	Convenience base-class to handle the dreary bits of a
	perfectly ordinary top-down walk through a syntax tree.
	"""

	def visit_Literal(self, expr:syntax.Literal): pass
	def visit_Grouping(self, expr:syntax.Grouping): self.visit(expr.expression)
	def visit_Unary(self, expr:syntax.Unary): self.visit(expr.right)
	def visit_Get(self, expr:syntax.Get): self.visit(expr.subject)

	def visit_Binary(self, expr:syntax.Binary):
		self.visit(expr.left)
		self.visit(expr.right)

	def visit_Bitwise(self, expr:syntax.Bitwise):
		self.visit(expr.left)
		self.visit(expr.right)

	def visit_Logical(self, expr:syntax.Logical):
		self.visit(expr.left)
		self.visit(expr.right)

	def visit_Ternary(self, expr:syntax.Ternary):
		self.visit(expr.condition)
		self.visit(expr.middle)
		self.visit(expr.right)

	def visit_Call(self, expr:syntax.Call):
		self.visit(expr.callee)
		for arg in expr.arguments:
			self.visit(arg)

	def visit_Set(self, expr:syntax.Set):
		self.visit(expr.value)
		self.visit(expr.subject)

	def visit_Expression(self, stmt:syntax.Expression): self.visit(stmt.expression)

	def visit_If(self, stmt:syntax.If):
		self.visit(stmt.condition)
		self.visit(stmt.then_branch)
		if stmt.else_branch is not None:
			self.visit(stmt.else_branch)

	def visit_While(self, stmt:syntax.While):
		self.visit(stmt.condition)
		self.visit(stmt.body)

	def visit_Break(self, stmt:syntax.Break):
		if stmt.level is not None:
			self.visit(stmt.level)

class Resolver(TopDown):
	"""
	Each scope maps a name to whether it is fully defined yet.
	The global scope is never on the stack.
	"""
	_scopes: list[dict[str, bool]]
	distances: dict[syntax.ValueExpression, int]

	def __init__(self, report:Report):
		self._report = report
		self._scopes = []
		self._function = FunctionKind.NONE
		self._class = ClassKind.NONE
		self.distances = {}

	def resolve(self, statements:list[syntax.Statement]) -> dict:
		for stmt in statements:
			self.visit(stmt)
		return self.distances

	# Scope bookkeeping

	def _begin_scope(self): self._scopes.append({})
	def _end_scope(self): self._scopes.pop()

	def _declare(self, name:Token):
		if self._scopes:
			self._scopes[-1][name.text] = False

	def _define(self, name:Token):
		if self._scopes:
			self._scopes[-1][name.text] = True

	def _resolve_local(self, expr:syntax.ValueExpression, name:Token):
		for distance, scope in enumerate(reversed(self._scopes)):
			if name.text in scope:
				self.distances[expr] = distance
				return

	def _resolve_function(self, params, body, kind:FunctionKind):
		enclosing = self._function
		self._function = kind
		self._begin_scope()
		for p in params:
			self._declare(p)
			self._define(p)
		for stmt in body:
			self.visit(stmt)
		self._end_scope()
		self._function = enclosing

	# Statements

	def visit_Block(self, stmt:syntax.Block):
		self._begin_scope()
		for s in stmt.statements:
			self.visit(s)
		self._end_scope()

	def visit_Let(self, stmt:syntax.Let):
		self._declare(stmt.name)
		if stmt.initializer is not None:
			self.visit(stmt.initializer)
		self._define(stmt.name)

	def visit_Function(self, stmt:syntax.Function):
		# Defined before the body, so functions may recurse.
		self._declare(stmt.name)
		self._define(stmt.name)
		self._resolve_function(stmt.params, stmt.body, FunctionKind.FUNCTION)

	def visit_Class(self, stmt:syntax.Class):
		enclosing = self._class
		self._class = ClassKind.CLASS
		self._declare(stmt.name)
		self._define(stmt.name)
		superclass = stmt.superclass
		if superclass is not None:
			if superclass.name.text == stmt.name.text:
				self._report.inherits_from_itself(superclass.name)
			self._class = ClassKind.SUBCLASS
			self.visit(superclass)
			self._begin_scope()
			self._scopes[-1]["super"] = True
		self._begin_scope()
		self._scopes[-1]["this"] = True
		for method in stmt.methods:
			kind = FunctionKind.INITIALIZER if method.name.text == "init" else FunctionKind.METHOD
			self._resolve_function(method.params, method.body, kind)
		for method in stmt.static_methods:
			self._resolve_function(method.params, method.body, FunctionKind.METHOD)
		self._end_scope()
		if superclass is not None:
			self._end_scope()
		self._class = enclosing

	def visit_Return(self, stmt:syntax.Return):
		if self._function is FunctionKind.NONE:
			self._report.return_from_top_level(stmt.keyword)
		if stmt.value is not None:
			if self._function is FunctionKind.INITIALIZER:
				self._report.return_from_initializer(stmt.keyword)
			self.visit(stmt.value)

	# Expressions

	def visit_Variable(self, expr:syntax.Variable):
		if self._scopes and self._scopes[-1].get(expr.name.text) is False:
			self._report.self_reference(expr.name)
		self._resolve_local(expr, expr.name)

	def visit_Assign(self, expr:syntax.Assign):
		self.visit(expr.value)
		self._resolve_local(expr, expr.name)

	def visit_Lambda(self, expr:syntax.Lambda):
		self._resolve_function(expr.params, expr.body, FunctionKind.FUNCTION)

	def visit_This(self, expr:syntax.This):
		if self._class is ClassKind.NONE:
			self._report.this_outside_class(expr.keyword)
			return
		self._resolve_local(expr, expr.keyword)

	def visit_Super(self, expr:syntax.Super):
		if self._class is ClassKind.NONE:
			self._report.super_outside_class(expr.keyword)
		elif self._class is not ClassKind.SUBCLASS:
			self._report.super_without_superclass(expr.keyword)
		self._resolve_local(expr, expr.keyword)
