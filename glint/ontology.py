"""
These most-fundamental classes in the syntax class hierarchy
are separate from the rest to avoid various circular-import
scenarios. The scanner makes tokens, the parser makes phrases,
and the diagnostics module points at either.
"""
from typing import Any, Optional
from .location import Segment, Span

END = "<END>"

class Phrase:
	def span(self) -> Span:
		""" Return the segment and slice this phrase came from """
		raise NotImplementedError(type(self))

class Token(Phrase):
	"""
	Representing the occurrence of a lexeme anywhere.

	The kind of a punctuation token is its own glyph.
	Reserved words have upper-case kinds. Otherwise, the kind
	is one of "name", "number", "string", or END.
	"""
	def __init__(self, kind:str, text:str, literal:Any, line:int, column:int, segment:Optional[Segment]=None, where:slice=None):
		self.kind, self.text, self.literal = kind, text, literal
		self.line, self.column = line, column
		self.segment = segment
		self.where = where if where is not None else slice(0, 0)

	def __repr__(self): return "<%s %r %d:%d>" % (self.kind, self.text, self.line, self.column)
	def span(self) -> Span: return Span(self.segment, self.where)

	def synthetic(self, kind:str, text:str) -> "Token":
		""" A token the parser makes up during desugaring, placed where this one is. """
		return Token(kind, text, None, self.line, self.column, self.segment, self.where)

class ValueExpression(Phrase): pass

class Statement(Phrase): pass
