"""
This module defines the specialized value-types that the tree-walker operates in terms of.
Basic primitive values play themselves: nil is None, booleans are bool,
numbers are always float, and text is str. Functions, classes, and instances need more help.
"""
import math
from typing import Optional
from .. import syntax
from ..environment import Environment
from .types import GlintValue, Callable, ARGS, VALUE, Return

class Function(Callable):
	""" The run-time manifestation of a function: a declaration tied to its natal environment. """
	def __init__(self, declaration:syntax.CallableNode, closure:Environment, is_initializer:bool=False):
		self.declaration = declaration
		self.closure = closure
		self.is_initializer = is_initializer

	def __str__(self):
		if isinstance(self.declaration, syntax.Function):
			return "<fun %s>" % self.declaration.name.text
		return "<lambda>"

	def arity(self) -> int: return len(self.declaration.params)

	def bind(self, instance:"Instance") -> "Function":
		""" A copy that sees `this` as the given instance, no matter where it gets called from later. """
		env = Environment(self.closure)
		env.define("this", instance)
		return Function(self.declaration, env, self.is_initializer)

	def call(self, interpreter, args:ARGS) -> VALUE:
		env = Environment(self.closure)
		for param, arg in zip(self.declaration.params, args):
			env.define(param.text, arg)
		signal = interpreter.execute_block(self.declaration.body, env)
		if self.is_initializer:
			return self.closure.get_at(0, "this")
		if isinstance(signal, Return):
			return signal.value
		# A break cannot get here: the parser confines it to loops within the same body.
		return None

class NativeFunction(Callable):
	""" Wraps a Python callable. Natives take the interpreter first, so they can reach its output. """
	def __init__(self, name:str, arity:int, fn):
		self.name = name
		self._arity = arity
		self._fn = fn

	def __str__(self): return "<native function>"
	def arity(self) -> int: return self._arity
	def call(self, interpreter, args:ARGS) -> VALUE: return self._fn(interpreter, *args)

class Instance(GlintValue):
	"""
	Fields belong to the instance; methods stay with the class and get bound on the way out.
	Metaclasses are instances with no class of their own.
	"""
	def __init__(self, klass:Optional["Class"]):
		self.klass = klass
		self.fields = {}

	def __str__(self): return "%s instance" % self.klass.name

	def get(self, name) -> VALUE:
		"""
		Returns the field or bound method, or raises KeyError.
		The evaluator turns that into a proper complaint with a token.
		"""
		if name in self.fields:
			return self.fields[name]
		if self.klass is not None:
			method = self.klass.find_method(self, name)
			if method is not None:
				return method
		raise KeyError(name)

	def set(self, name, value:VALUE):
		self.fields[name] = value

class Class(Instance, Callable):
	"""
	A class is an instance of its metaclass, which holds the static methods.
	The metaclass of a subclass inherits from the metaclass of the superclass,
	so static methods inherit just like the other kind.
	"""
	def __init__(self, name:str, superclass:Optional["Class"], methods:dict[str, Function], static_methods:dict[str, Function]):
		if static_methods is None:
			metaclass = None
		else:
			meta_super = superclass.metaclass if superclass is not None else None
			metaclass = Class(name, meta_super, static_methods, None)
		super().__init__(metaclass)
		self.name = name
		self.superclass = superclass
		self.methods = methods
		self.metaclass = metaclass

	def __str__(self): return self.name

	def find_unbound(self, name:str) -> Optional[Function]:
		klass = self
		while klass is not None:
			if name in klass.methods:
				return klass.methods[name]
			klass = klass.superclass
		return None

	def find_method(self, instance:Instance, name:str) -> Optional[Function]:
		method = self.find_unbound(name)
		return None if method is None else method.bind(instance)

	def arity(self) -> int:
		initializer = self.find_unbound("init")
		return 0 if initializer is None else initializer.arity()

	def call(self, interpreter, args:ARGS) -> VALUE:
		instance = Instance(self)
		initializer = self.find_method(instance, "init")
		if initializer is not None:
			initializer.call(interpreter, args)
		return instance

###############################################################################

def is_truthy(value:VALUE) -> bool:
	if value is None: return False
	if isinstance(value, bool): return value
	return True

def is_equal(a:VALUE, b:VALUE) -> bool:
	if a is None: return b is None
	if type(a) is not type(b): return False
	return a == b

def stringify(value:VALUE) -> str:
	if value is None: return "nil"
	if isinstance(value, bool): return "true" if value else "false"
	if isinstance(value, float):
		if math.isnan(value): return "NaN"
		if math.isinf(value): return "Infinity" if value > 0 else "-Infinity"
		text = repr(value)
		return text[:-2] if text.endswith(".0") else text
	return str(value)
