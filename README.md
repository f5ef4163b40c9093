# morphkit

Tools for building the binary data behind an inflexion-based morphology
engine for Russian and Ukrainian:

- an inflexion table compiler that turns a textual table description into
  a packed binary table file and a symbol file of table references;
- word trees, a class table and a dumper that writes serialized data as
  C-style byte arrays;
- readers for packed inflexion tables (stripping endings, finding the
  range of leading characters, flattening a table into a plain tree);
- a dictionary builder that collects stems with lexeme identifiers;
- a ranking tuner and a part-of-speech probability table generator.

Text going into the binary formats is encoded as Windows-1251.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Compiling inflexion tables

```
morphkit-tfc [options] inputname binaryname symbolsname
```

Options:

- `-w` — the source files are in Windows-1251 instead of code page 866;
- `-lang:rus` / `-lang:ukr` — grammatical token set, Russian (default) or
  Ukrainian.

Run without three file names, it prints its usage and returns -1.

A source file holds tables and include directives (`.include` or
`.включить`, relative to the including file's folder):

```
.include other-tables.txt

.table  noun-a, noun-b
{
  .И
  ''   И
  а    Р
  у    Д
}
```

A table header is `.table`, `.type`, `.таблица` or `.тип` followed by one
or more comma-separated names. Each line inside the braces is an ending,
then optionally a grammatical expression (tokens joined by `|`, no
spaces), a name of a nested table and a name of an optional table; fields
are separated by spaces or commas. A line starting with `.` applies its
tokens to the current grammatical state. `''` stands for an empty ending,
and `//` at the start of a line or after a space begins a comment. Equal
tables are stored once under all their names.

The binary file starts with the signature `inflex` followed by the
tables; the symbols file holds the number of names, then each name and
its table offset in name order.

From Python:

```python
from morphkit.gramap import GramMap
from morphkit.ftable import FlexList
from morphkit.sourcefile import open_source
from morphkit.tfc import compile_source

grammar = GramMap.russian()
tables = FlexList()

with open_source("tables.txt", "cp866") as source:
    compile_source(source, tables, grammar)

tables.relocate()
binary = tables.store_tables()
symbols = tables.store_references()
```

Errors in a source raise `ValueError` (or `OSError` for files that cannot
be opened) whose message ends with the file name and line number.

## Tuning class ranks

```
morphkit-tune-ranking [options] dataset
```

Options:

- `-ns=name`, `-nspace=name` (or with `:`) — wrap the output in a namespace;
- `-va=name`, `-vaname=name` (or with `:`) — name of the class rank array,
  default `ClassRanks`;
- `-verbose` — print optimisation progress.

Each dataset line has the form

```
cls:<class>	psp:<part of speech>	stm:<stem length>	flx:<ending length>	occ:<count>	<+ or ->
```

The tuner first fits the three ending-length factors (`tune_by_flex_powers`),
then the per-class ranks (`tune_by_class_ranks`), and writes both arrays
to standard output (`format_tables`).

## Part-of-speech probability tables

```
morphkit-psptable INPUT OUTPUT
```

reads lines of the form `psp, formid: count, formid: count, ...` and
writes normalised probability tables as source text. `PspTable` offers the
same through `parse_line`, `normalize` and `render`.

## Library pieces

- `morphkit.wordtree.WordTree` — a byte-keyed tree with serialization and
  offset enumeration;
- `morphkit.classtable.ClassTable` — deduplicating table of serializable
  classes with 16-bit offsets;
- `morphkit.dumppage.BinaryDumper` and `format_bytes` — write byte arrays
  as source text;
- `morphkit.references.TableIndex` — table name to offset lookup, 0 for
  unknown names;
- `morphkit.sourcefile.Source` / `open_source` — comment-stripping line
  reader with one-line push-back;
- `morphkit.ftables.FlexStripper`, `get_min_max_char` — strip endings and
  find leading character ranges using packed tables;
- `morphkit.plaintable.create_plain_table` — flatten a packed table into
  one tree of endings;
- `morphkit.buildmorph.DictBuilder` — build stem and lexeme trees from
  dictionary files and dump them as `stemtree.cpp` and `lidstree.cpp`;
- `morphkit.serial` — the variable-length integer and byte-string encoding
  used throughout.

## What it does not do

morphkit only builds data. It does not analyse or generate word forms
itself: there is no lemmatizer and no form builder. `DictBuilder` needs a
resolver supplied by the caller that turns a dictionary line into stems
and entries, and no command wraps it.