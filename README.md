# fuqdb

fuqdb keeps CSV tables in memory and works on them with a small query
language. You can type commands one at a time at an interactive prompt, or
run a whole script file.

## Installation

```
pip install .
```

## Running

Start the interactive prompt:

```
fuqdb
```

Each line you type is run as one command. Type `exit` (or end the input) to
leave the prompt. Type `flist` to list every function, and `help(name)` to
see how a function is used.

Run a script, one command per line:

```
fuqdb queries.fuq
```

The script stops at the first line that causes an error; that line and its
line number are printed. If the file cannot be opened, `Could not open
<path>` is written to standard error.

## The language

A command is a function call. Arguments are separated by commas. Text after
`#` is a comment, unless the `#` is inside a double-quoted string.

```
load("people.csv", people)         # load a CSV file as table "people"
create(pets, name, species, age)   # new empty table with three columns
insert(pets, 0, "Rex", "dog", 4)   # append a row
sortrule(pets, age, 1)             # sort by "age", ascending
insert(pets, 1, "Tom", "cat", 2)   # insert in sorted position
sort(pets)
printt(pets)
save("pets.csv", pets)
```

Functions:

| Function | Usage |
|---|---|
| `printt` | `printt(table)` prints a table or sub-table as a box |
| `prints` | `prints(message)` prints a message |
| `create` | `create(table, columns...)` creates an empty table |
| `load` | `load(path, table)` loads a `.csv` file |
| `unload` | `unload(table)` drops a table |
| `save` | `save(path, table)` writes a table or sub-table as CSV |
| `set` | `set(table, column, value)` sets a column in every row; `value` may be an expression |
| `filter` | `filter(table, condition)` returns the sub-table of rows where `condition` is 1 |
| `erase` | `erase(table)` empties a table, or removes the rows of a sub-table from its table |
| `sortrule` | `sortrule(table, column, ascending)` sets how the table is sorted |
| `insert` | `insert(table, sort, values...)` adds a row, in sorted position if `sort` is not 0 |
| `colinsert` | `colinsert(table, column)` adds an empty column |
| `colerase` | `colerase(table, column)` removes a column |
| `join` | `join(table1, table2, sort)` appends the rows of `table2` to `table1` |
| `sort` | `sort(table)` sorts a table or sub-table by the current sort rule |
| `help` | `help(function)` describes a function |

Sub-tables returned by `filter` can be passed straight to another function
on the same line; they are discarded when the line is done.

### Expressions

The condition of `filter` and the value of `set` can be expressions. Inside
them, `[column]` stands for the value of that column in the current row, and
`[INDEX]` stands for the row number.

```
printt(filter(people, [age] >= 18 && [city] == "Berlin"))
colinsert(people, label)
set(people, label, [name] + " (member)")
erase(filter(people, [INDEX] % 2 == 0))
```

An expression must not begin with a quoted string; put a column reference or
a number first.

Operators, from tightest to loosest binding:

* `.` (character at index), `$` (text from index on), `:` (first n characters)
* `^`, `!`
* `*`, `/`, `%`
* `+`, `-`
* `>`, `<`, `>=`, `<=`
* `==`, `!=`
* `&&`
* `||`

Numbers are computed as numbers; integer results are whole numbers and
floating-point results have six decimals. `+` on text joins the two values.
Logical operators and integer comparisons give `1` or `0`.

### CSV files

Only files ending in `.csv` are loaded. Fields are separated by commas. Write
`\,` for a comma inside a field and `\\` for a backslash. Every row must have
as many fields as the header row; loading stops at the first row that does
not, keeping the rows read before it.

## Limitations

* `!=` tests for equality, exactly like `==`.
* `>`, `<`, `>=` and `<=` on text that is not a number always give `1`.
* Comparisons involving a floating-point number give `1.000000` or
  `0.000000`, which `filter` does not take as true.
* Negative numbers are not recognised as numbers in comparisons and
  arithmetic.
* Tables live only in memory; nothing is kept unless you `save` it.

## Using it from Python

```python
import io
from fuqdb.interpreter import Context

out = io.StringIO()
ctx = Context(out)
ctx.run('create(t, a, b)')
ctx.run('insert(t, 0, 1, 2)')
ctx.run('printt(t)')
print(out.getvalue())
```

`Context.tables` maps names to `fuqdb.table.Table` objects, and `ctx.err`
is set once an error occurs that would stop a script.
`fuqdb.table.load_csv(path)` loads a CSV file into a `Table` and raises
`TableLoadError` on failure. `fuqdb.cli.run_script(path, context)` runs a
script file with a given context and returns the number of the failing line
(or `None`), and `fuqdb.cli.repl(context, stdin)` runs the interactive loop on
any text stream.