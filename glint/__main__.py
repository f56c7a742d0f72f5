"""
So that `python -m glint program.glint` works the same as the `glint` script.
"""
from .cmdline import main

main()
