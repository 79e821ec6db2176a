#!/usr/bin/env python3
"""
SYMNORM Command-Line Interface

Provides interactive REPL, script execution, and pipe/filter modes.

Usage:
    symnorm                         # Start REPL
    symnorm exprs.txt               # Run each line of a file
    symnorm -e "2*(3+x)"            # Simplify one expression
    symnorm -t -e "2*(3+x)"         # ... and show which passes fired
    echo "2*(3+4)" | symnorm        # Filter mode

Output:
    Each "=" segment prints its simplified LaTeX form followed by its value:

        symnorm> 2*(3+4)
        2 \\cdot 3 + 2 \\cdot 4
        = 14

    When every segment of a multi-segment line evaluates, an extra
    "equal: true|false" line compares them.

REPL Commands:
    :help                  Show help
    :trace on|off          Toggle pass tracing
    :tree on|off           Toggle printing the expression tree
    :passes                List rewrite passes
    :enable PASS           Enable a pass
    :disable PASS          Disable a pass
    :budget [SWEEPS [NODES]]  Show or set the simplification budget
    :quit                  Exit
"""

import argparse
import math
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .errors import SymnormError, EvalError
from .expression import format_decimal, format_tree, parse_expressions
from .evaluator import evaluate
from .latex import to_latex
from .simplifier import Simplifier, DEFAULT_MAX_SWEEPS, DEFAULT_MAX_NODES
from .tokenizer import tokenize

# Try to import readline for better REPL experience
try:
    import readline
    HAS_READLINE = True
except ImportError:
    HAS_READLINE = False

HISTORY_FILE = Path.home() / ".symnorm_history"


class SymnormCompleter:
    """Tab completer for SYMNORM REPL."""

    COMMANDS = [
        ":help", ":quit", ":exit", ":q",
        ":trace", ":tree", ":passes",
        ":enable", ":disable", ":budget",
    ]

    TOGGLE_OPTIONS = ["on", "off"]

    def __init__(self, repl: 'SymnormREPL'):
        self.repl = repl
        self.matches: List[str] = []

    def complete(self, text: str, state: int) -> Optional[str]:
        """Return the next possible completion for 'text'."""
        if state == 0:
            line = readline.get_line_buffer() if HAS_READLINE else ""
            self.matches = self._get_matches(text, line)

        try:
            return self.matches[state]
        except IndexError:
            return None

    def _get_matches(self, text: str, line: str) -> list:
        """Get list of matches for the current input."""
        line = line.lstrip()

        if line.startswith(":trace ") or line.startswith(":tree "):
            return [t for t in self.TOGGLE_OPTIONS if t.startswith(text)]

        if line.startswith(":enable ") or line.startswith(":disable "):
            names = self.repl.simplifier.pass_names()
            return [n for n in names if n.startswith(text)]

        if text.startswith(":") or (line.startswith(":") and " " not in line):
            return [c for c in self.COMMANDS if c.startswith(text)]

        return []


def count_parens(text: str) -> int:
    """Count unbalanced parentheses. Returns >0 if more open than close."""
    depth = 0
    for c in text:
        if c == '(':
            depth += 1
        elif c == ')':
            depth -= 1
    return depth


def format_value(value: float) -> str:
    """Render an evaluation result, dropping the decimal point for integers."""
    return format_decimal(value)


def _parse_toggle(arg: str, current: bool) -> bool:
    if arg.lower() in ("on", "true", "1"):
        return True
    if arg.lower() in ("off", "false", "0"):
        return False
    return not current


class SymnormREPL:
    """Interactive REPL for symnorm."""

    def __init__(self, simplifier: Optional[Simplifier] = None):
        self.simplifier = simplifier or Simplifier()
        self.trace = False
        self.tree = False
        self.running = True
        self.multi_line_buffer = ""

        # Set up readline history and completion
        if HAS_READLINE:
            self.history_file = HISTORY_FILE
            try:
                readline.read_history_file(self.history_file)
            except (FileNotFoundError, OSError):
                pass
            readline.set_history_length(1000)

            self.completer = SymnormCompleter(self)
            readline.set_completer(self.completer.complete)
            readline.parse_and_bind("tab: complete")
            readline.set_completer_delims(" \t\n")

    def save_history(self):
        """Save readline history."""
        if HAS_READLINE:
            try:
                readline.write_history_file(self.history_file)
            except OSError as e:
                print(f"Could not save history: {e}", file=sys.stderr)

    def handle_command(self, line: str) -> Optional[str]:
        """
        Handle a REPL command (starts with :).

        Returns a message to print, or None.
        """
        parts = line[1:].split(None, 1)
        if not parts:
            return "Unknown command. Type :help for help."

        cmd = parts[0].lower()
        arg = parts[1].strip() if len(parts) > 1 else ""

        if cmd == "help":
            return self.help_text()

        elif cmd in ("quit", "exit", "q"):
            self.running = False
            return None

        elif cmd == "trace":
            self.trace = _parse_toggle(arg, self.trace)
            return f"Tracing {'enabled' if self.trace else 'disabled'}"

        elif cmd == "tree":
            self.tree = _parse_toggle(arg, self.tree)
            return f"Tree output {'enabled' if self.tree else 'disabled'}"

        elif cmd == "passes":
            return "\n".join(self.simplifier.list_passes())

        elif cmd in ("enable", "disable"):
            if not arg:
                return f"Usage: :{cmd} PASS"
            try:
                if cmd == "enable":
                    self.simplifier.enable_pass(arg)
                else:
                    self.simplifier.disable_pass(arg)
            except KeyError:
                return f"Unknown pass: {arg}"
            return f"{cmd.capitalize()}d pass: {arg}"

        elif cmd == "budget":
            if not arg:
                return (f"Budget: {self.simplifier.max_sweeps} sweeps, "
                        f"{self.simplifier.max_nodes} nodes")
            values = arg.split()
            try:
                numbers = [int(v) for v in values]
            except ValueError:
                return "Usage: :budget [SWEEPS [NODES]]"
            if len(numbers) > 2 or any(n < 1 for n in numbers):
                return "Usage: :budget [SWEEPS [NODES]]"
            self.simplifier.max_sweeps = numbers[0]
            if len(numbers) == 2:
                self.simplifier.max_nodes = numbers[1]
            return (f"Budget set to {self.simplifier.max_sweeps} sweeps, "
                    f"{self.simplifier.max_nodes} nodes")

        else:
            return f"Unknown command: {cmd}. Type :help for help."

    def help_text(self) -> str:
        """Return help text."""
        return """SYMNORM REPL Commands:
  :help                    Show this help
  :trace on|off            Toggle pass tracing
  :tree on|off             Toggle printing the expression tree
  :passes                  List rewrite passes
  :enable PASS             Enable a pass
  :disable PASS            Disable a pass
  :budget [SWEEPS [NODES]] Show or set the simplification budget
  :quit                    Exit

Syntax:
  2*(3+x)                  Simplify and evaluate an expression
  sin(pi/2) + sqrt(4)      Functions need parentheses
  2+2=4                    Each side is simplified and evaluated
"""

    def process_line(self, line: str) -> Optional[str]:
        """
        Process a single line of input.

        Returns the result to print, or None.
        """
        line = line.strip()

        # Empty line or comment
        if not line or line.startswith("#"):
            return None

        if line.startswith(":"):
            return self.handle_command(line)

        try:
            expressions = parse_expressions(tokenize(line))
            output: List[str] = []
            values: List[Optional[float]] = []

            for expr in expressions:
                if self.trace:
                    result, trace = self.simplifier.simplify(expr, trace=True)
                else:
                    result, trace = self.simplifier.simplify(expr), None

                output.append(to_latex(result))
                if self.tree:
                    output.append(format_tree(result))
                if trace is not None and trace.steps:
                    output.append(trace.format("passes"))

                try:
                    value = evaluate(result)
                    output.append(f"= {format_value(value)}")
                except EvalError as e:
                    value = None
                    output.append(f"= Error: {e}")
                values.append(value)

            if len(values) > 1 and all(v is not None for v in values):
                equal = all(math.isclose(values[0], v, rel_tol=1e-9, abs_tol=1e-12)
                            for v in values[1:])
                output.append(f"equal: {'true' if equal else 'false'}")

            return "\n".join(output)

        except SymnormError as e:
            return f"Error: {e}"

    def run(self):
        """Run the REPL loop."""
        print("SYMNORM - Symbolic Normalization")
        print("Type :help for help, :quit to exit")
        print()

        while self.running:
            try:
                prompt = "....... " if self.multi_line_buffer else "symnorm> "
                line = input(prompt)

                if self.multi_line_buffer:
                    self.multi_line_buffer += " " + line
                else:
                    self.multi_line_buffer = line

                # Keep reading while parentheses are open
                paren_count = count_parens(self.multi_line_buffer)
                if paren_count > 0 and not self.multi_line_buffer.lstrip().startswith(":"):
                    continue

                complete_input = self.multi_line_buffer
                self.multi_line_buffer = ""

                result = self.process_line(complete_input)
                if result:
                    print(result)

            except EOFError:
                print()
                break
            except KeyboardInterrupt:
                if self.multi_line_buffer:
                    print("\nInput cancelled")
                    self.multi_line_buffer = ""
                else:
                    print()
                continue

        self.save_history()


class ScriptRunner:
    """Runs files and piped input through the REPL."""

    def __init__(self, simplifier: Optional[Simplifier] = None):
        self.repl = SymnormREPL(simplifier)

    def run_script(self, path: Path, quiet: bool = False) -> int:
        """
        Run a file with one expression or command per line.

        Args:
            path: Path to the file
            quiet: If True, don't print expression results

        Returns:
            Exit code (0 for success)
        """
        try:
            lines = path.read_text().splitlines()
        except OSError as e:
            print(f"Error reading {path}: {e}", file=sys.stderr)
            return 1

        for lineno, line in enumerate(lines, 1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            result = self.repl.process_line(line)
            if result is None:
                continue
            if result.startswith("Error") or result.startswith("Unknown"):
                print(f"{path}:{lineno}: {result}", file=sys.stderr)
                return 1
            if not quiet and not line.startswith(":"):
                print(result)

        return 0

    def run_expression(self, expr_str: str) -> int:
        """
        Process a single expression.

        Returns:
            Exit code (0 for success)
        """
        result = self.repl.process_line(expr_str)
        if result:
            print(result)
            if result.startswith("Error"):
                return 1
        return 0

    def run_stdin(self) -> int:
        """
        Read expressions from stdin and process them.

        Returns:
            Exit code (0 for success)
        """
        for line in sys.stdin:
            result = self.repl.process_line(line)
            if result:
                print(result)
                if result.startswith("Error"):
                    return 1

        return 0


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="symnorm",
        description="SYMNORM - Symbolic Normalization of arithmetic expressions",
        epilog="Examples:\n"
               "  symnorm                        Start REPL\n"
               "  symnorm exprs.txt              Process each line of a file\n"
               "  symnorm -e '2*(3+x)'           Simplify one expression\n"
               "  echo '2*(3+4)' | symnorm       Filter mode\n",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        "script",
        nargs="?",
        help="File with one expression per line"
    )

    parser.add_argument(
        "-e", "--expr",
        help="Process a single expression"
    )

    parser.add_argument(
        "-t", "--trace",
        action="store_true",
        help="Show which rewrite passes fired"
    )

    parser.add_argument(
        "--tree",
        action="store_true",
        help="Print the simplified expression tree"
    )

    parser.add_argument(
        "--max-sweeps",
        type=int,
        default=DEFAULT_MAX_SWEEPS,
        help=f"Maximum simplification sweeps (default: {DEFAULT_MAX_SWEEPS})"
    )

    parser.add_argument(
        "--max-nodes",
        type=int,
        default=DEFAULT_MAX_NODES,
        help=f"Maximum expression size during simplification (default: {DEFAULT_MAX_NODES})"
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Quiet mode (suppress non-essential output)"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    args = parser.parse_args()

    if args.max_sweeps < 1 or args.max_nodes < 1:
        print("Budget values must be positive", file=sys.stderr)
        sys.exit(1)

    runner = ScriptRunner(Simplifier(max_sweeps=args.max_sweeps, max_nodes=args.max_nodes))
    runner.repl.trace = args.trace
    runner.repl.tree = args.tree

    if args.script:
        sys.exit(runner.run_script(Path(args.script), quiet=args.quiet))

    elif args.expr:
        sys.exit(runner.run_expression(args.expr))

    elif not sys.stdin.isatty():
        sys.exit(runner.run_stdin())

    else:
        runner.repl.run()


if __name__ == "__main__":
    main()
