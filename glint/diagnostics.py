import sys, random
from typing import Sequence, Optional, TextIO
from boozetools.support.failureprone import illustration

from .ontology import Phrase, Token, END

class TooManyIssues(Exception):
	pass

def _outburst():
	particle = ["Oh, ", "Well, ", "Aw, ", "", ""]

	minced_oaths = [
		'Ack', 'ARGH', 'Blargh', 'Confound it', 'Crud', 'Curses', "Crikey",
		'Dag Nabbit', 'Drat', 'Fiddlesticks', 'Good Grief', "Great Scott",
		'Heavens', 'Jeepers', 'Nuts', 'Rats', 'Woe is me',
	]

	resignations = [
		'I am undone.',
		'I cannot continue.',
		'I have no idea what the right answer is.',
		'I need to ask for help.',
	]

	return "%s%s! %s"%tuple(map(random.choice, (particle, minced_oaths, resignations)))

class Report:
	"""
	The one channel for complaints from the scanner, parser, and resolver.
	Those phases keep going after a problem so as to find more of them,
	so issues accumulate here and get shown all together.
	Run-time faults, by contrast, get shown the moment they happen.
	"""
	_issues : list["Pic"]

	def __init__(self, *, verbose:int=0, max_issues=3, console:Optional[TextIO]=None):
		self._verbose = verbose or 0   # Because None is incomparable.
		self._issues = []
		self._max_issues = max_issues
		self._console = console
		self.faults = []
		self.had_runtime_error = False

	def ok(self): return not self._issues
	def sick(self): return bool(self._issues)

	@property
	def issues(self) -> tuple["Pic", ...]: return tuple(self._issues)

	def issue(self, it:"Pic"):
		self._issues.append(it)
		if len(self._issues) == self._max_issues:
			raise TooManyIssues(self)

	def reset(self):
		self._issues.clear()
		self.faults.clear()
		self.had_runtime_error = False

	def console(self) -> TextIO:
		return self._console or sys.stderr

	def info(self, *args):
		if self._verbose:
			print(*args, file=self.console())

	def error(self, guilty: Sequence[Phrase], msg: str):
		""" Actually make an entry of an issue """
		for g in guilty: assert isinstance(g, Phrase), g
		problem = [Annotation(g, "") for g in guilty]
		self.issue(Pic(msg, problem))

	def complain_to_console(self):
		""" Emit all the issues to the console. """
		_bemoan(self._issues, self.console())

	def assert_no_issues(self, message=""):
		""" Does what it says on the tin """
		if self._issues:
			self.complain_to_console()
			raise AssertionError(_outburst()+" "+message)

	# Methods the driver calls on the way in:
	def _file_error(self, path, prefix:str):
		self.issue(Pic(prefix+" "+str(path), []))

	def no_such_file(self, path):
		self._file_error(path, "I see no file called")

	def broken_file(self, path):
		self._file_error(path, "Something went pear-shaped while trying to read")

	# Methods the scanner calls:
	def bad_lexeme(self, token:Token, complaint:str):
		intro = "Glint could not make sense of some text."
		self.issue(Pic(intro, [Annotation(token, complaint)]))

	# Methods the parser calls:
	def parse_error(self, token:Token, hint:str):
		if token.kind == END:
			intro = "Glint ran out of words in %s." % token.segment
		else:
			intro = "Glint got confused by '%s'." % token.text
		self.issue(Pic(intro, [Annotation(token, hint)]))

	def break_outside_loop(self, token:Token):
		self.error([token], "Can't break outside of a loop.")

	def break_too_deep(self, token:Token, depth:int):
		plural = '' if depth == 1 else 's'
		intro = "This break asks to leave more loops than surround it."
		caption = "Only %d loop%s here." % (depth, plural)
		self.issue(Pic(intro, [Annotation(token, caption)]))

	# Methods the resolver calls:
	def self_reference(self, name:Token):
		intro = "Can't read local variable '%s' in its own initializer." % name.text
		self.issue(Pic(intro, [Annotation(name)]))

	def this_outside_class(self, keyword:Token):
		self.error([keyword], "Can't use 'this' outside of a class.")

	def super_outside_class(self, keyword:Token):
		self.error([keyword], "Can't use 'super' outside of a class.")

	def super_without_superclass(self, keyword:Token):
		self.error([keyword], "Can't use 'super' in a class with no superclass.")

	def return_from_top_level(self, keyword:Token):
		self.error([keyword], "Can't return from top-level code.")

	def return_from_initializer(self, keyword:Token):
		intro = "Can't return a value from an initializer."
		footer = ["An initializer always returns the new instance."]
		self.issue(Pic(intro, [Annotation(keyword)], footer))

	def inherits_from_itself(self, name:Token):
		self.error([name], "A class can't inherit from itself.")

	# Methods the run-time calls:
	def runtime_fault(self, fault):
		""" Show a run-time fault immediately, pointing at the token responsible. """
		self.faults.append(fault)
		self.had_runtime_error = True
		token = fault.token
		where = "[line %d:%d]" % (token.line, token.column)
		_bemoan([Pic(fault.message, [Annotation(token)], [where])], self.console())

	def stack_overflow(self):
		self.had_runtime_error = True
		_bemoan([Pic("Stack overflow.", [], ["The script recursed too deeply."])], self.console())

	def failed_assertion(self, message:str):
		self.had_runtime_error = True
		_bemoan([Pic("Assertion failed: " + message, [])], self.console())

class Annotation:
	caption: str
	def __init__(self, node:Phrase, caption:str=""):
		span = node.span()
		self.segment = span.segment
		self.slice = span.slice
		self.row = getattr(node, "line", 0)
		self.col = getattr(node, "column", 1)
		self.caption = caption
	def illustrate(self):
		if self.segment is None:
			return "   (%s)" % (self.caption or "somewhere without source text")
		single_line = self.segment.line_of_text(self.row)
		width = max(1, self.slice.stop - self.slice.start)
		return illustration(single_line, self.col - 1, width, prefix='% 6d |' % self.row, caption=self.caption)

class Pic:
	def __init__(self, intro:str, anns:list[Annotation], footer=()):
		self.intro, self._anns, self._footer = intro, anns, footer
	def as_text(self):
		lines = [self.intro, ""]
		segment = None
		for ann in self._anns:
			if ann.segment is not segment:
				segment = ann.segment
				if segment is not None: lines.append(str(segment))
			lines.append(ann.illustrate())
		lines.extend(self._footer)
		return '\n'.join(lines)

def _bemoan(issues:Sequence[Pic], console:TextIO):
	""" Emit all the issues to the console. """
	if issues:
		print("*"*60, file=console)
		print(_outburst(), file=console)
	for i in issues:
		print("  -"*20, file=console)
		print(i.as_text(), file=console)
	console.flush()
