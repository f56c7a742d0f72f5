"""
The few native functions every program starts out with.
"""
import time
from .tree_walker.values import NativeFunction, is_truthy, stringify

def _time(interpreter):
	return time.time()

def _print(interpreter, value):
	interpreter.out.write(stringify(value))

def _println(interpreter, value):
	interpreter.out.write(stringify(value) + "\n")

def _assert(interpreter, condition, message):
	if not is_truthy(condition):
		raise AssertionError(stringify(message))

NATIVES = [
	NativeFunction("time", 0, _time),
	NativeFunction("print", 1, _print),
	NativeFunction("println", 1, _println),
	NativeFunction("assert", 2, _assert),
]

def install_natives(interpreter):
	for native in NATIVES:
		interpreter.globals.define(native.name, native)
