"""
This module aims to express an interface agreement
between the evaluator and various kinds of data.
"""

from abc import ABC, abstractmethod
from typing import Any, NamedTuple, Optional, Sequence, Union
from ..ontology import Token

class GlintValue(ABC):
	""" Root for classes that implement specialized run-time data structures """

NATIVE_DATA = Union[None, bool, float, str]
VALUE = Union[NATIVE_DATA, GlintValue]
ARGS = Sequence[VALUE]

class Callable(GlintValue):
	""" A run-time object that can be applied with arguments. """
	@abstractmethod
	def arity(self) -> int: pass

	@abstractmethod
	def call(self, interpreter, args:ARGS) -> VALUE: pass

###############################################################################
#
# Statements normally complete with None. These unwind instead, and every
# statement executor either forwards them or consumes them.

class Return(NamedTuple):
	value: Any

class Break(NamedTuple):
	level: int

SIGNAL = Optional[Union[Return, Break]]

###############################################################################

class RuntimeFault(Exception):
	""" Something went wrong while a program ran. The token says where. """
	def __init__(self, token:Token, message:str):
		super().__init__(message)
		self.token = token
		self.message = message

class OperandTypeError(RuntimeFault): pass
class UndefinedVariable(RuntimeFault): pass
class UndefinedProperty(RuntimeFault): pass
class NotCallable(RuntimeFault): pass
class NotAnObject(RuntimeFault): pass
class ArityMismatch(RuntimeFault): pass
class InvalidSuperclass(RuntimeFault): pass
class InvalidBreakLevel(RuntimeFault): pass
