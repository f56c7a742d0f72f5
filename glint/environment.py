"""
Lexical scopes at run-time.

This is the canonical list-structured search: each scope holds its own
bindings and a link to the scope around it. The global scope has no link.
"""
from typing import Any, Optional
from .ontology import Token
from .tree_walker.types import UndefinedVariable

class Environment:
	values: dict[str, Any]

	def __init__(self, enclosing:Optional["Environment"]=None):
		self.values = {}
		self.enclosing = enclosing

	def __repr__(self):
		depth, env = 0, self.enclosing
		while env is not None:
			depth, env = depth+1, env.enclosing
		return "<Environment depth=%d %s>" % (depth, sorted(self.values))

	def define(self, name:str, value:Any):
		""" Create or overwrite a binding in this very scope. """
		self.values[name] = value

	def get(self, name:Token) -> Any:
		env = self
		while env is not None:
			if name.text in env.values:
				return env.values[name.text]
			env = env.enclosing
		raise UndefinedVariable(name, "Undefined variable '%s'." % name.text)

	def assign(self, name:Token, value:Any):
		env = self
		while env is not None:
			if name.text in env.values:
				env.values[name.text] = value
				return
			env = env.enclosing
		raise UndefinedVariable(name, "Undefined variable '%s'." % name.text)

	def ancestor(self, distance:int) -> "Environment":
		env = self
		for _ in range(distance):
			env = env.enclosing
		return env

	# The resolver promises these names exist at these distances.
	# A KeyError or AssertionError from here means the resolver is wrong.

	def get_at(self, distance:int, name:str) -> Any:
		return self.ancestor(distance).values[name]

	def assign_at(self, distance:int, name:str, value:Any):
		scope = self.ancestor(distance).values
		assert name in scope, (distance, name)
		scope[name] = value
