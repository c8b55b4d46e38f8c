"""Interactive menu that runs registered self-tests by category."""

from __future__ import annotations

import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass

YALIBC = "yalibc"
PLATFORM = "platform"

# Menu key -> (category, heading shown above its tests)
_CATEGORIES: dict[str, tuple[str, str]] = {
    "1": (YALIBC, "YaLibC Tests"),
    "2": (PLATFORM, "Platform Tests"),
}

_INVALID = "Invalid selection. Please try again.\n"


@dataclass(frozen=True)
class TestEntry:
    """One registered test: its menu description and the function to run.

    The function returns the number of errors it found (0 on success).
    """

    description: str
    fn: Callable[[], int]


class TestRegistry:
    """Tests grouped by category, kept in registration order."""

    def __init__(self) -> None:
        self._tests: dict[str, list[TestEntry]] = {}

    def register(self, category: str, description: str, fn: Callable[[], int]):
        """Add a test to a category and return ``fn`` unchanged."""
        if not callable(fn):
            raise TypeError("test function must be callable")
        if not description:
            raise ValueError("test description must not be empty")
        self._tests.setdefault(category, []).append(TestEntry(description, fn))
        return fn

    def tests(self, category: str) -> tuple[TestEntry, ...]:
        """Tests of a category in registration order; empty if there are none."""
        return tuple(self._tests.get(category, ()))


class TestMenu:
    """Text menu driven by one character at a time.

    ``read_char`` returns the next input character, or ``""``/``None`` when the
    input is exhausted, which ends the menu. ``write`` receives output text.
    """

    def __init__(
        self,
        registry: TestRegistry,
        read_char: Callable[[], str | None],
        write: Callable[[str], object],
    ) -> None:
        self.registry = registry
        self._read_char = read_char
        self._write = write
        self._finished = False

    def _read(self) -> str | None:
        ch = self._read_char()
        if not ch:
            self._finished = True
            return None
        return ch

    def _print_test_menu(self, tests: Sequence[TestEntry], heading: str) -> None:
        lines = [f"\n---=== {heading} ===---\n", "Select a test:\n"]
        lines.extend(f"\t{n} -> {entry.description}\n" for n, entry in enumerate(tests, 1))
        lines.append("\t0 -> Back to category menu\n")
        self._write("".join(lines))

    def _heading(self, category: str) -> str:
        for cat, heading in _CATEGORIES.values():
            if cat == category:
                return heading
        return category

    def run_category(self, category: str) -> int:
        """Offer the category's tests until '0' is chosen; return the failures counted."""
        tests = self.registry.tests(category)
        heading = self._heading(category)
        total_failures = 0
        while True:
            self._print_test_menu(tests, heading)
            ch = self._read()
            if ch is None or ch == "0":
                return total_failures
            index = ord(ch[0]) - ord("1")
            if 0 <= index < len(tests):
                result = tests[index].fn()
                if result:
                    total_failures += result
                    self._write(f"\nTest failed with {result} errors\n")
                self._write(f"\nTotal failures so far: {total_failures}\n")
            else:
                self._write(_INVALID)

    def run(self) -> int:
        """Run the category menu until input ends; return the total failures."""
        self._finished = False
        total_failures = 0
        while not self._finished:
            self._write(
                "\n---=== TestSuite Menu ===---\n"
                "Select test category:\n"
                "\t1 -> YaLibC tests\n"
                "\t2 -> Platform tests\n"
            )
            ch = self._read()
            if ch is None:
                break
            selected = _CATEGORIES.get(ch)
            if selected is None:
                self._write(_INVALID)
                continue
            total_failures += self.run_category(selected[0])
            self._write(f"\nTotal failures across all tests: {total_failures}\n")
        self._write("\n---===DONE===---\n")
        return total_failures


def main(argv=None) -> int:
    """Run the test menu on standard input and output.

    Returns 0 when no test failed, 1 otherwise.
    """
    if argv:
        sys.stderr.write("usage: menu\n")
        return 2
    menu = TestMenu(TestRegistry(), lambda: sys.stdin.read(1), sys.stdout.write)
    return 0 if menu.run() == 0 else 1