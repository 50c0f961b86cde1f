"""
Keypad Calculator command line front end

This module handles:
1. Evaluating a single expression (--expr)
2. Replaying a sequence of keypad labels (--keys)
3. Running an interactive keypad session (--interactive)
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from keypad_calculator.config.settings import load_settings
from keypad_calculator.core.editor import ExpressionEditor
from keypad_calculator.core.preferences import ThemePreference
from keypad_calculator.engine.pipeline import ExpressionPipeline
from keypad_calculator.storage.key_value_store import InMemoryStore, JsonFileStore

logger = logging.getLogger(__name__)

QUIT_COMMANDS = ("quit", "exit", "q")


def print_display(editor: ExpressionEditor) -> None:
    snapshot = editor.snapshot()
    memory_flag = " [M]" if snapshot.memory_set else ""
    print(f"  {snapshot.expression}{memory_flag}")
    if snapshot.result:
        print(f"  = {snapshot.result}")
    elif snapshot.preview is not None:
        print(f"  ~ {snapshot.preview}")


def print_history(editor: ExpressionEditor) -> None:
    if not editor.history:
        print("  (no history)")
        return
    for idx, line in enumerate(editor.history, 1):
        print(f"  [{idx}] {line}")


def replay_keys(editor: ExpressionEditor, labels: List[str]) -> bool:
    """Press each label in order; stop at the first unknown one."""
    for label in labels:
        try:
            editor.press_label(label)
        except ValueError as e:
            print(f"❌ {e}")
            return False
    return True


def run_interactive(editor: ExpressionEditor, theme: ThemePreference) -> None:
    """Read keypad labels and commands from stdin until quit or EOF."""
    print("Keypad calculator. Enter key labels separated by spaces.")
    print("Commands: history, clear-history, theme, quit")

    while True:
        try:
            line = input("> ")
        except EOFError:
            print()
            break

        command = line.strip().lower()
        if not command:
            continue
        if command in QUIT_COMMANDS:
            break
        if command == "history":
            print_history(editor)
            continue
        if command == "clear-history":
            editor.clear_history()
            print("  History cleared")
            continue
        if command == "theme":
            print(f"  Theme: {theme.toggle()}")
            continue

        replay_keys(editor, line.split())
        print_display(editor)

    editor.flush()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the keypad-calc CLI command."""
    parser = argparse.ArgumentParser(
        description="Keypad calculator: evaluate expressions or replay key presses",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Evaluate an expression
  keypad-calc --expr "2+3×4"

  # Replay keypad presses
  keypad-calc --keys "1 + 2 = + 4 ="

  # Interactive session with persisted memory and history
  keypad-calc --interactive --store ~/.keypad_calc.json
        """,
    )

    # Mode selection
    mode_group = parser.add_mutually_exclusive_group(required=True)
    mode_group.add_argument(
        "--expr",
        type=str,
        metavar="TEXT",
        help="Evaluate one expression and print the result",
    )
    mode_group.add_argument(
        "--keys",
        type=str,
        metavar="LABELS",
        help="Space separated keypad labels to press in order",
    )
    mode_group.add_argument(
        "--interactive",
        action="store_true",
        help="Run an interactive keypad session",
    )

    parser.add_argument(
        "--config",
        type=str,
        metavar="PATH",
        help="YAML settings file (default: bundled calculator.yaml)",
    )
    parser.add_argument(
        "--store",
        type=str,
        metavar="PATH",
        help="JSON file for history, memory and theme (default: in memory only)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    settings = load_settings(args.config)

    if args.expr is not None:
        pipeline = ExpressionPipeline(
            precision=settings.precision, angle_mode=settings.angle_mode
        )
        result = pipeline.evaluate_expression(args.expr)
        print(result.display)
        if not result.success:
            logger.info(f"{result.error_kind}: {result.error_message}")
            return 1
        return 0

    store = JsonFileStore(Path(args.store).expanduser()) if args.store else InMemoryStore()
    editor = ExpressionEditor(store=store, settings=settings)

    if args.keys is not None:
        if not replay_keys(editor, args.keys.split()):
            return 2
        print(f"Expression: {editor.expression}")
        print(f"Result: {editor.result}")
        editor.flush()
        return 0

    theme = ThemePreference(store, settings.theme_key)
    run_interactive(editor, theme)
    return 0


if __name__ == "__main__":
    sys.exit(main())
