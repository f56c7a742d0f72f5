"""
The set of parse-nodes in simple form.
Parse actions build these bottom-up as each rule in Glint.md is reduced.
Node identity matters: the resolver keys its distance map on the node objects themselves,
so these classes must keep the default identity-based equality and hashing.
"""
from typing import Any, Optional, Sequence, Union
from .ontology import Token, ValueExpression, Statement

#######################################################################
# Expressions

class Assign(ValueExpression):
	def __init__(self, name:Token, value:ValueExpression):
		self.name, self.value = name, value
	def __repr__(self): return "(%s = %r)" % (self.name.text, self.value)

class Binary(ValueExpression):
	""" Arithmetic, comparison, and equality operators """
	def __init__(self, left:ValueExpression, op:Token, right:ValueExpression):
		self.left, self.op, self.right = left, op, right
	def __repr__(self): return "(%r %s %r)" % (self.left, self.op.text, self.right)

class Bitwise(ValueExpression):
	""" The operators & | ^ << >>, which work on 32-bit integers. """
	def __init__(self, left:ValueExpression, op:Token, right:ValueExpression):
		self.left, self.op, self.right = left, op, right
	def __repr__(self): return "(%r %s %r)" % (self.left, self.op.text, self.right)

class Call(ValueExpression):
	def __init__(self, callee:ValueExpression, paren:Token, arguments:Sequence[ValueExpression]):
		self.callee, self.paren, self.arguments = callee, paren, arguments
	def __repr__(self): return "%r(%s)" % (self.callee, ", ".join(map(repr, self.arguments)))

class Get(ValueExpression):
	def __init__(self, subject:ValueExpression, name:Token):
		self.subject, self.name = subject, name
	def __repr__(self): return "%r.%s" % (self.subject, self.name.text)

class Grouping(ValueExpression):
	def __init__(self, expression:ValueExpression):
		self.expression = expression
	def __repr__(self): return "(%r)" % self.expression

class Literal(ValueExpression):
	def __init__(self, value:Any):
		self.value = value
	def __repr__(self): return "<Literal %r>" % (self.value,)

class Logical(ValueExpression):
	""" The short-cut operators 'and' and 'or' """
	def __init__(self, left:ValueExpression, op:Token, right:ValueExpression):
		self.left, self.op, self.right = left, op, right
	def __repr__(self): return "(%r %s %r)" % (self.left, self.op.text, self.right)

class Set(ValueExpression):
	def __init__(self, subject:ValueExpression, name:Token, value:ValueExpression):
		self.subject, self.name, self.value = subject, name, value
	def __repr__(self): return "(%r.%s = %r)" % (self.subject, self.name.text, self.value)

class Super(ValueExpression):
	def __init__(self, keyword:Token, method:Token):
		self.keyword, self.method = keyword, method
	def __repr__(self): return "super.%s" % self.method.text

class Ternary(ValueExpression):
	def __init__(self, condition:ValueExpression, question:Token, middle:ValueExpression, colon:Token, right:ValueExpression):
		self.condition, self.question, self.middle, self.colon, self.right = condition, question, middle, colon, right
	def __repr__(self): return "(%r ? %r : %r)" % (self.condition, self.middle, self.right)

class This(ValueExpression):
	def __init__(self, keyword:Token):
		self.keyword = keyword
	def __repr__(self): return "this"

class Unary(ValueExpression):
	def __init__(self, op:Token, right:ValueExpression):
		self.op, self.right = op, right
	def __repr__(self): return "(%s%r)" % (self.op.text, self.right)

class Variable(ValueExpression):
	def __init__(self, name:Token):
		self.name = name
	def __repr__(self): return "<ref:%s>" % self.name.text

#######################################################################
# Statements

class Block(Statement):
	def __init__(self, statements:Sequence[Statement]):
		self.statements = statements

class Break(Statement):
	"""
	Once parsing is done, the front end counts the loops lexically around
	each break and records that as the greatest level it may sensibly carry.
	"""
	max_level: int

	def __init__(self, token:Token, level:Optional[ValueExpression]):
		self.token, self.level = token, level
		self.max_level = 0

class Expression(Statement):
	def __init__(self, expression:ValueExpression):
		self.expression = expression

class Function(Statement):
	def __init__(self, name:Token, params:Sequence[Token], body:Sequence[Statement]):
		self.name, self.params, self.body = name, params, body
	def __repr__(self): return "{fun|%s(%s)}" % (self.name.text, ", ".join(p.text for p in self.params))

class Lambda(ValueExpression):
	""" An anonymous function. The arrow form gets a body of just one return-statement. """
	def __init__(self, token:Token, params:Sequence[Token], body:Sequence[Statement]):
		self.token, self.params, self.body = token, params, body
	def __repr__(self): return "{lambda|%s}" % ", ".join(p.text for p in self.params)

CallableNode = Union[Function, Lambda]

class Class(Statement):
	def __init__(self, name:Token, superclass:Optional[Variable], methods:Sequence[Function], static_methods:Sequence[Function]):
		self.name, self.superclass = name, superclass
		self.methods, self.static_methods = methods, static_methods
	def __repr__(self): return "{class|%s}" % self.name.text

class If(Statement):
	def __init__(self, condition:ValueExpression, then_branch:Statement, else_branch:Optional[Statement]):
		self.condition, self.then_branch, self.else_branch = condition, then_branch, else_branch

class Let(Statement):
	def __init__(self, name:Token, initializer:Optional[ValueExpression]):
		self.name, self.initializer = name, initializer
	def __repr__(self): return "{let|%s}" % self.name.text

class Return(Statement):
	def __init__(self, keyword:Token, value:Optional[ValueExpression]):
		self.keyword, self.value = keyword, value

class While(Statement):
	def __init__(self, condition:ValueExpression, body:Statement):
		self.condition, self.body = condition, body
