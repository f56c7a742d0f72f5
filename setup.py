"""
Packaging script for PyPI.
"""
import setuptools
from pathlib import Path

try:
	from boozetools.macroparse.runtime import make_tables
except ImportError:
	pass
else:
	make_tables(Path(__file__).parent / "glint" / "Glint.md")

setuptools.setup(
	name='glint-lang',
	version='0.1.0',
	packages=['glint', 'glint.tree_walker', ],
	package_data={
		'glint': ["Glint.md", "Glint.automaton"],
	},
	entry_points={
		'console_scripts': ["glint = glint.cmdline:main"],
	},
	license='MIT',
	description='A small dynamically-typed scripting language with closures and classes, run by a tree-walking interpreter',
	long_description=open('README.md').read(),
	long_description_content_type="text/markdown",
	classifiers=[
		"Programming Language :: Python :: 3.9",
		"License :: OSI Approved :: MIT License",
		"Operating System :: OS Independent",
		"Development Status :: 3 - Alpha",
		"Intended Audience :: Developers",
		"Intended Audience :: Education",
		"Topic :: Software Development :: Interpreters",
		"Topic :: Education",
		"Environment :: Console",
	],
	python_requires='>=3.9',
	install_requires=[
		"booze-tools>=0.6.2.1",
	]
)
