"""
Text in, statements out, by way of the tables built from Glint.md.

Scanning runs to the end before parsing begins, so that one pass can
find every bad character. The parser then works through the tokens,
reporting each syntax error and skipping ahead to the next semicolon.

Two bits of sugar disappear here:
	* `for` loops become `while` loops.
	* Compound assignment `x += e` becomes `x = x + e`.

A last walk over the finished tree counts the loops lexically around
each `break`, so the run-time never sees a break that could escape its function.
"""
import sys
from pathlib import Path
from typing import Optional
from boozetools.macroparse.runtime import TypicalApplication, make_tables
from boozetools.scanning.engine import IterableScanner
from boozetools.scanning.interface import INITIAL
from boozetools.parsing import shift_reduce
from boozetools.parsing.interface import ParseError, ERROR_SYMBOL
from . import syntax
from .diagnostics import Report
from .location import Segment
from .ontology import Token, END
from .resolution import TopDown

class GlintParseError(ParseError):
	""" The parser could not get back on track. The report has the details. """

_tables = make_tables(Path(__file__).parent/"Glint.md")
_parse_table = _tables['parser']
RESERVED = frozenset(t for t in _parse_table["terminals"] if t.isupper() and t.isalpha())
KEYWORDS = frozenset(t.lower() for t in RESERVED)

MAX_ARGS = 255

COMPOUND_ASSIGNMENT = {"+=": "+", "-=": "-", "*=": "*", "/=": "/", "%=": "%"}

ESCAPES = {
	'b': '\b', 'f': '\f', 'r': '\r', 'n': '\n', 't': '\t',
	'\\': '\\', "'": "'", '"': '"',
}

def _describe(terminal:str) -> str:
	if terminal in RESERVED: return "'%s'" % terminal.lower()
	if terminal in ("name", "number", "string"): return "a " + terminal
	return "'%s'" % terminal

class GlintParser(TypicalApplication):
	"""
	One of these serves every parse, for the tables are the costly part.
	Each scan notes which segment it reads and which report hears the complaints.
	"""
	segment: Segment
	report: Report

	def bind_scan_actions(self, each_action):
		self._scan_bindings = super().bind_scan_actions(each_action)
		return self._scan_bindings

	def bind_parse_actions(self, each_constructor):
		self._combine = super().bind_parse_actions(each_constructor)
		return self._combine

	def scan(self, segment:Segment, report:Report) -> list[Token]:
		""" The last token is always END, which marks where the text runs out. """
		self.segment, self.report = segment, report
		self._opener, self._chunks = 0, []
		self.yy = IterableScanner(segment.text, self.dfa, self._scan_bindings)
		tokens = [token for kind, token in self.yy]
		size = len(segment.text)
		if self.yy.condition == "in_string":
			self._complain(slice(self._opener, size), "Unterminated string literal.")
		elif self.yy.condition == "in_comment":
			self._complain(slice(self._opener, self._opener+2), "Unterminated block comment.")
		tokens.append(self._make(END, slice(size, size), None))
		return tokens

	def parse_tokens(self, tokens:list[Token], report:Report) -> list[syntax.Statement]:
		assert tokens and tokens[-1].kind == END
		self.report, self._end = report, tokens[-1]
		each_pair = ((token.kind, token) for token in tokens[:-1])
		try: return shift_reduce.parse(self.hfa, self._combine, each_pair, on_error=self)
		except GlintParseError: return []

	# Scanner actions

	def _make(self, kind:str, where:slice, literal) -> Token:
		line, column = self.segment.find_row_col(where.start)
		return Token(kind, self.segment.text[where], literal, line, column, self.segment, where)

	def _complain(self, where:slice, complaint:str):
		self.report.bad_lexeme(self._make("error", where, None), complaint)

	def scan_ignore(self, yy:IterableScanner): pass

	def scan_number(self, yy:IterableScanner):
		yy.token("number", self._make("number", yy.slice(), float(yy.match())))

	def scan_word(self, yy:IterableScanner):
		word = yy.match()
		kind = word.upper() if word in KEYWORDS else "name"
		yy.token(kind, self._make(kind, yy.slice(), None))

	def scan_punctuation(self, yy:IterableScanner):
		glyph = sys.intern(yy.match())
		yy.token(glyph, self._make(glyph, yy.slice(), None))

	def scan_bad_character(self, yy:IterableScanner):
		self._complain(yy.slice(), "Unexpected character %r." % yy.match())

	def on_stuck(self, yy:IterableScanner):
		self.scan_bad_character(yy)

	def scan_begin_comment(self, yy:IterableScanner):
		self._opener = yy.left
		yy.enter("in_comment")

	def scan_end_comment(self, yy:IterableScanner):
		yy.enter(INITIAL)

	def scan_begin_string(self, yy:IterableScanner):
		self._opener, self._chunks = yy.left, []
		yy.enter("in_string")

	def scan_string_text(self, yy:IterableScanner): self._chunks.append(yy.match())
	def scan_string_escape(self, yy:IterableScanner): self._chunks.append(ESCAPES[yy.match()[1]])
	def scan_unicode_escape(self, yy:IterableScanner): self._chunks.append(chr(int(yy.match()[2:], 16)))
	def scan_bad_escape(self, yy:IterableScanner): self._complain(yy.slice(), "Unrecognized escape sequence.")
	def scan_bad_unicode_escape(self, yy:IterableScanner): self._complain(yy.slice(), "Invalid hex character escape.")

	def scan_end_string(self, yy:IterableScanner):
		yy.enter(INITIAL)
		where = slice(self._opener, yy.right)
		yy.token("string", self._make("string", where, ''.join(self._chunks)))

	# Parser actions

	@staticmethod
	def default_parse(ctor, *args):
		return getattr(syntax, ctor)(*args)

	@staticmethod
	def parse_nothing(): return None
	@staticmethod
	def parse_empty(): return []
	@staticmethod
	def parse_first(item): return [item]

	@staticmethod
	def parse_more(items, another):
		items.append(another)
		return items

	@staticmethod
	def parse_more_statements(statements, another):
		# A statement lost to a syntax error arrives as None.
		if another is not None: statements.append(another)
		return statements

	@staticmethod
	def parse_literal(token:Token): return syntax.Literal(token.literal)
	@staticmethod
	def parse_true(): return syntax.Literal(True)
	@staticmethod
	def parse_false(): return syntax.Literal(False)
	@staticmethod
	def parse_nil(): return syntax.Literal(None)

	@staticmethod
	def parse_if_then(condition, then_branch): return syntax.If(condition, then_branch, None)

	@staticmethod
	def parse_no_members(): return [], []

	@staticmethod
	def parse_method(members, function:syntax.Function):
		members[0].append(function)
		return members

	@staticmethod
	def parse_static_method(members, function:syntax.Function):
		members[1].append(function)
		return members

	@staticmethod
	def parse_class_declaration(name:Token, superclass, members) -> syntax.Class:
		methods, static_methods = members
		return syntax.Class(name, superclass, methods, static_methods)

	def _check_params(self, params:list[Token]):
		if len(params) > MAX_ARGS:
			self.report.parse_error(params[MAX_ARGS], "Can't have more than %d parameters." % MAX_ARGS)

	def parse_function(self, name:Token, params:list[Token], body:list) -> syntax.Function:
		self._check_params(params)
		return syntax.Function(name, params, body)

	def parse_lambda(self, keyword:Token, params:list[Token], body:list) -> syntax.Lambda:
		self._check_params(params)
		return syntax.Lambda(keyword, params, body)

	def parse_arrow_lambda(self, backslash:Token, params:list[Token], arrow:Token, expr) -> syntax.Lambda:
		self._check_params(params)
		return syntax.Lambda(backslash, params, [syntax.Return(arrow, expr)])

	def parse_call(self, callee, args:list, paren:Token) -> syntax.Call:
		if len(args) > MAX_ARGS:
			self.report.parse_error(paren, "Can't have more than %d arguments." % MAX_ARGS)
		return syntax.Call(callee, paren, args)

	def parse_assignment(self, target, operator:Token, value):
		if operator.kind in COMPOUND_ASSIGNMENT:
			if isinstance(target, syntax.Variable):
				value = syntax.Binary(syntax.Variable(target.name), _arithmetic(operator), value)
			elif isinstance(target, syntax.Get):
				value = syntax.Binary(syntax.Get(target.subject, target.name), _arithmetic(operator), value)
		if isinstance(target, syntax.Variable):
			return syntax.Assign(target.name, value)
		if isinstance(target, syntax.Get):
			return syntax.Set(target.subject, target.name, value)
		self.report.parse_error(operator, "Invalid assignment target.")
		return target

	@staticmethod
	def parse_for_loop(keyword:Token, initializer, condition, increment, body:syntax.Block) -> syntax.Statement:
		if isinstance(initializer, syntax.Let):
			return _loop_with_fresh_binding(keyword, initializer, condition, increment, body)
		return _plain_loop(initializer, condition, increment, body)

	# When things go wrong

	def _hint(self, pds) -> str:
		expected = [t for t in self.expected_tokens(pds) if t not in (END, ERROR_SYMBOL)]
		if expected and len(expected) <= 4:
			return "Expected %s here." % " or ".join(map(_describe, expected))
		return "This doesn't fit here."

	def unexpected_token(self, kind, semantic, pds):
		self.report.parse_error(semantic, self._hint(pds))

	def unexpected_eof(self, pds):
		self.report.parse_error(self._end, self._hint(pds))

	def will_recover(self, tokens):
		return None

	def did_not_recover(self):
		raise GlintParseError()

	def exception_parsing(self, ex:Exception, constructor_id:int, args):
		raise ex from None

glint_parser = GlintParser(_tables)

def _arithmetic(operator:Token) -> Token:
	glyph = COMPOUND_ASSIGNMENT[operator.kind]
	return operator.synthetic(glyph, glyph)

def _plain_loop(initializer, condition, increment, body:syntax.Block) -> syntax.Statement:
	if increment is not None:
		body = syntax.Block([body, syntax.Expression(increment)])
	if condition is None:
		condition = syntax.Literal(True)
	loop = syntax.While(condition, body)
	if initializer is not None:
		loop = syntax.Block([initializer, loop])
	return loop

def _loop_with_fresh_binding(keyword:Token, let:syntax.Let, condition, increment, body:syntax.Block) -> syntax.Statement:
	"""
	Each trip around the loop gets its own binding of the loop variable,
	so closures made in the body see the value from their own iteration.
	A hidden carrier variable (whose name no program can spell) holds the
	value between trips. The increment runs against a fresh copy as well:

		{
			let i# = <init>;
			while (true) {
				let i = i#;
				if (!(<condition>)) break;
				<body>
				i# = i;
				{ let i = i#; <increment>; i# = i; }
			}
		}
	"""
	name = let.name
	carrier = name.synthetic("name", name.text+"#")

	def copy(source:Token, target:Token) -> syntax.Statement:
		return syntax.Expression(syntax.Assign(target, syntax.Variable(source)))

	trip = [syntax.Let(name, syntax.Variable(carrier))]
	if condition is not None:
		stop = syntax.Unary(keyword.synthetic("!", "!"), syntax.Grouping(condition))
		trip.append(syntax.If(stop, syntax.Break(keyword, None), None))
	trip.append(body)
	trip.append(copy(name, carrier))
	if increment is not None:
		trip.append(syntax.Block([
			syntax.Let(name, syntax.Variable(carrier)),
			syntax.Expression(increment),
			copy(name, carrier),
		]))
	loop = syntax.While(syntax.Literal(True), syntax.Block(trip))
	return syntax.Block([syntax.Let(carrier, let.initializer), loop])

class LoopDepth(TopDown):
	"""
	Records on each `break` how many loops lexically surround it.
	The count starts over in every function, method, and lambda body.
	"""
	def __init__(self, report:Report):
		self._report = report
		self._depth = 0

	def check(self, statements):
		for stmt in statements:
			self.visit(stmt)

	def _body(self, statements):
		outer, self._depth = self._depth, 0
		self.check(statements)
		self._depth = outer

	def visit_While(self, stmt:syntax.While):
		self.visit(stmt.condition)
		self._depth += 1
		self.visit(stmt.body)
		self._depth -= 1

	def visit_Break(self, stmt:syntax.Break):
		stmt.max_level = self._depth
		level = stmt.level
		if not self._depth:
			self._report.break_outside_loop(stmt.token)
		elif isinstance(level, syntax.Literal) and isinstance(level.value, float) and not 0 <= level.value <= self._depth:
			self._report.break_too_deep(stmt.token, self._depth)
		super().visit_Break(stmt)

	def visit_Function(self, stmt:syntax.Function): self._body(stmt.body)
	def visit_Lambda(self, expr:syntax.Lambda): self._body(expr.body)

	def visit_Class(self, stmt:syntax.Class):
		self.check(stmt.methods)
		self.check(stmt.static_methods)

	def visit_Block(self, stmt:syntax.Block): self.check(stmt.statements)

	def visit_Let(self, stmt:syntax.Let):
		if stmt.initializer is not None:
			self.visit(stmt.initializer)

	def visit_Return(self, stmt:syntax.Return):
		if stmt.value is not None:
			self.visit(stmt.value)

	def visit_Assign(self, expr:syntax.Assign): self.visit(expr.value)
	def visit_Variable(self, expr:syntax.Variable): pass
	def visit_This(self, expr:syntax.This): pass
	def visit_Super(self, expr:syntax.Super): pass

def scan_text(segment:Segment, report:Report) -> list[Token]:
	return glint_parser.scan(segment, report)

def parse_tokens(tokens:list[Token], report:Report) -> list[syntax.Statement]:
	statements = glint_parser.parse_tokens(tokens, report)
	LoopDepth(report).check(statements)
	return statements

def parse_text(text:str, report:Report, path:Optional[Path]=None, label:str="<input>") -> list[syntax.Statement]:
	""" Submit text to scanner and parser; the report says whether it went well. """
	tokens = scan_text(Segment(text, path, label), report)
	if report.sick(): return []
	return parse_tokens(tokens, report)
