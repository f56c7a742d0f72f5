"""
A simple way to pass-around and point at places within source text.
Source text arrives in segments: a whole file, or one line typed at the prompt.
Tokens remember their segment and a character slice within it.
"""
import bisect
from pathlib import Path
from typing import NamedTuple, Optional

class Segment:
	""" One contiguous body of source text """
	def __init__(self, text:str, path:Optional[Path]=None, label:str="<input>"):
		assert isinstance(path, Path) or path is None
		self.text = text
		self.path = path
		self.label = label if path is None else str(path)
		self._lines = None
		self._starts = None

	def __str__(self): return self.label

	def line_of_text(self, row:int) -> str:
		""" Rows count from one, as in error messages. Past the end is blank. """
		if self._lines is None:
			self._lines = self.text.split("\n")
		if 0 < row <= len(self._lines):
			return self._lines[row-1]
		return ""

	def find_row_col(self, offset:int) -> tuple[int, int]:
		""" Both count from one. """
		if self._starts is None:
			self._starts = [0] + [i+1 for i, c in enumerate(self.text) if c == "\n"]
		row = bisect.bisect_right(self._starts, offset)
		return row, offset - self._starts[row-1] + 1

class Span(NamedTuple):
	""" Aimed at whatever prints error messages """
	segment: Optional[Segment]
	slice: slice
