#!/usr/bin/env python3
"""
formulabox.py — CLI narzędzie FormulaBox.

Działa lokalnie, nie wymaga uruchomionego serwera API.
`eval` zawsze korzysta z podpowiedzi offline (--var), nigdy nie pyta backendu;
`repl` pyta backend, chyba że podano --offline.

Konfiguracja: zmienne środowiskowe z prefiksem FORMULABOX_
lub plik .env (np. FORMULABOX_SUGGESTION_BACKEND_URL=https://...).

Podkomendy:
    eval     — wpisz wyrażenie znak po znaku i pokaż tokeny oraz wynik
    suggest  — zapytaj backend podpowiedzi
    repl     — interaktywna sesja widżetu formuły

Użycie:
    python formulabox.py eval --text "2 + 3 * 4"
    python formulabox.py eval --var 1=revenue --bind 1=1.5 --text $'rev\n* 2'
    python formulabox.py suggest --query rev
    python formulabox.py repl
    python formulabox.py repl --offline --var 1=revenue --var 2=cost
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Any

from rich import box
from rich.console import Console
from rich.table import Table

from contracts import OPERATORS, FormulaView, Suggestion, Token


# -- helpers ---------------------------------------------------------------

_CONSOLE: Console | None = None


def _console() -> Console:
    global _CONSOLE
    if _CONSOLE is None:
        _CONSOLE = Console(highlight=False)
    return _CONSOLE


def _safe_terminal_text(value: Any) -> str:
    s = str(value)
    encoding = sys.stdout.encoding or "utf-8"
    try:
        s.encode(encoding)
        return s
    except UnicodeEncodeError:
        return s.encode(encoding, errors="replace").decode(encoding, errors="replace")


def _print_tokens_table(tokens: list[Token]) -> None:
    table = Table(title=f"Tokens [{len(tokens)}]", box=box.ASCII, show_lines=False)
    table.add_column("#", justify="right", no_wrap=True)
    table.add_column("Kind", no_wrap=True, style="cyan")
    table.add_column("Value")
    table.add_column("Name")
    table.add_column("ID", no_wrap=True)
    for idx, token in enumerate(tokens):
        table.add_row(
            str(idx),
            token.kind.value,
            _safe_terminal_text(token.value),
            _safe_terminal_text(token.name or "-"),
            _safe_terminal_text(token.id or "-"),
        )
    _console().print(table)


def _print_suggestions_table(suggestions: list[Suggestion], highlighted: int | None = None) -> None:
    table = Table(title=f"Suggestions [{len(suggestions)}]", box=box.ASCII, show_lines=False)
    table.add_column("", no_wrap=True)
    table.add_column("#", justify="right", no_wrap=True)
    table.add_column("ID", no_wrap=True, style="cyan")
    table.add_column("Name")
    for idx, s in enumerate(suggestions):
        table.add_row(
            ">" if idx == highlighted else "",
            str(idx),
            _safe_terminal_text(s.id),
            _safe_terminal_text(s.name),
        )
    _console().print(table)


def _print_view(view: FormulaView) -> None:
    _print_tokens_table(view.tokens)
    if view.suggestions_open:
        _print_suggestions_table(view.suggestions, view.highlighted)
    _console().print(f"expression: {_safe_terminal_text(view.expression) or '-'}")
    _console().print(f"pending:    {view.pending!r}")
    _console().print(f"result:     {view.result.display()}")
    if view.result.error:
        _console().print(f"[dim]error:      {_safe_terminal_text(view.result.error)}[/dim]")


def _parse_pairs(pairs: list[str], option: str) -> list[tuple[str, str]]:
    result = []
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            print(f"Błąd: {option} oczekuje KLUCZ=WARTOŚĆ, otrzymano {pair!r}", file=sys.stderr)
            sys.exit(1)
        result.append((key, value))
    return result


def _build_session(args: argparse.Namespace):
    from adapters.evaluator.ast_evaluator import ASTEvaluator
    from adapters.input_classifier.keystroke_classifier import KeystrokeClassifier
    from adapters.suggestion_provider import HttpSuggestionProvider, StaticSuggestionProvider
    from adapters.token_store.in_memory_token_store import InMemoryTokenStore
    from config import Settings
    from session import FormulaSession

    variables = _parse_pairs(getattr(args, "var", None) or [], "--var")
    if getattr(args, "offline", True):
        provider: Any = StaticSuggestionProvider(variables)
    else:
        s = Settings()
        provider = HttpSuggestionProvider(
            backend_url=s.suggestion_backend_url,
            timeout_ms=s.suggestion_timeout_ms,
        )

    env: dict[str, float] = {}
    for var_id, raw in _parse_pairs(getattr(args, "bind", None) or [], "--bind"):
        try:
            env[var_id] = float(raw)
        except ValueError:
            print(f"Błąd: wartość zmiennej {var_id!r} nie jest liczbą: {raw!r}", file=sys.stderr)
            sys.exit(1)

    session = FormulaSession(
        store=InMemoryTokenStore(),
        classifier=KeystrokeClassifier(),
        evaluator=ASTEvaluator(),
        suggestion_provider=provider,
        env=env,
    )
    return session, provider


async def _type_text(session: Any, text: str) -> None:
    """Symuluje pisanie: operatory jako klawisze, nowa linia jako Enter."""
    for ch in text:
        if ch in OPERATORS:
            session.press(ch)
        elif ch == "\n":
            session.press("Enter")
        else:
            await session.set_input(session.pending + ch)
    if session.pending.strip():
        session.press("Enter")


async def _close_provider(provider: Any) -> None:
    aclose = getattr(provider, "aclose", None)
    if aclose is not None:
        await aclose()


# -- podkomendy async ------------------------------------------------------

async def _eval(args: argparse.Namespace) -> None:
    text = args.text or sys.stdin.read().strip()
    if not text:
        print("Błąd: podaj wyrażenie przez --text lub stdin", file=sys.stderr)
        sys.exit(1)

    session, provider = _build_session(args)
    try:
        await _type_text(session, text)
    finally:
        await _close_provider(provider)

    view = session.view()
    _print_tokens_table(view.tokens)
    _console().print(f"expression: {_safe_terminal_text(view.expression)}")
    _console().print(f"result:     {view.result.display()}")
    if args.steps:
        for step in view.result.steps:
            _console().print(f"  {_safe_terminal_text(step)}")
    if not view.result.evaluable:
        if view.result.error:
            print(f"error:      {view.result.error}", file=sys.stderr)
        sys.exit(2)


async def _suggest(args: argparse.Namespace) -> None:
    from adapters.suggestion_provider import HttpSuggestionProvider
    from config import Settings

    s = Settings()
    provider = HttpSuggestionProvider(
        backend_url=args.url or s.suggestion_backend_url,
        timeout_ms=s.suggestion_timeout_ms,
    )
    try:
        suggestions = await provider.lookup(args.query)
    finally:
        await provider.aclose()
    _print_suggestions_table(suggestions)


_REPL_KEYS = {
    ":enter": "Enter",
    ":up": "ArrowUp",
    ":down": "ArrowDown",
    ":esc": "Escape",
    ":bs": "Backspace",
}

_REPL_HELP = """\
Wpisz tekst, aby ustawić pole wejściowe (pojedynczy operator = klawisz).
  :enter :up :down :esc :bs   klawisze
  :pick N                     kliknij podpowiedź N
  :edit N TEKST               podmień token N
  :del N                      usuń token N
  :props N                    pokaż token N
  :clear                      wyczyść formułę
  :blur                       zamknij podpowiedzi (utrata fokusu)
  :quit                       wyjście"""


def _index_arg(parts: list[str]) -> int | None:
    if len(parts) < 2:
        return None
    try:
        return int(parts[1])
    except ValueError:
        return None


async def _repl(args: argparse.Namespace) -> None:
    session, provider = _build_session(args)
    console = _console()
    console.print(_REPL_HELP)
    try:
        while True:
            try:
                line = input("formula> ")
            except EOFError:
                break
            cmd = line.strip()

            if cmd in (":quit", ":q"):
                break
            if cmd in _REPL_KEYS:
                session.press(_REPL_KEYS[cmd])
            elif cmd in OPERATORS:
                session.press(cmd)
            elif cmd == ":clear":
                session.clear()
            elif cmd == ":blur":
                session.blur()
            elif cmd.startswith(":"):
                parts = cmd.split(maxsplit=2)
                index = _index_arg(parts)
                if index is None:
                    console.print(_REPL_HELP)
                    continue
                if parts[0] == ":pick":
                    ok = session.select_suggestion(index)
                elif parts[0] == ":del":
                    ok = session.delete_token(index)
                elif parts[0] == ":edit" and len(parts) == 3:
                    ok = session.edit_token(index, parts[2])
                elif parts[0] == ":props":
                    token = session.token_properties(index)
                    ok = token is not None
                    if token is not None:
                        _print_tokens_table([token])
                        continue
                else:
                    console.print(_REPL_HELP)
                    continue
                if not ok:
                    console.print(f"[yellow]Brak pozycji {index}.[/yellow]")
            else:
                await session.set_input(line)
            _print_view(session.view())
    finally:
        await _close_provider(provider)


# -- main ------------------------------------------------------------------

def main() -> None:
    parser = argparse.ArgumentParser(
        prog="formulabox",
        description="FormulaBox — CLI (lokalny, bez serwera API)",
    )
    parser.add_argument("--log-level", default=None, help="Nadpisuje FORMULABOX_LOG_LEVEL")
    sub = parser.add_subparsers(dest="command", required=True)

    # eval
    p = sub.add_parser("eval", help="Wpisz wyrażenie i pokaż wynik")
    p.add_argument("--text", "-t", help="Wyrażenie (lub stdin)")
    p.add_argument("--var", action="append", metavar="ID=NAZWA",
                   help="Zmienna dostępna w podpowiedziach (offline)")
    p.add_argument("--bind", action="append", metavar="ID=WARTOŚĆ",
                   help="Wartość zmiennej o danym id")
    p.add_argument("--steps", action="store_true", help="Pokaż kroki obliczeń")

    # suggest
    p = sub.add_parser("suggest", help="Zapytaj backend podpowiedzi")
    p.add_argument("--query", "-q", required=True, help="Wpisywany tekst")
    p.add_argument("--url", help="Adres backendu (domyślnie z konfiguracji)")

    # repl
    p = sub.add_parser("repl", help="Interaktywna sesja formuły")
    p.add_argument("--offline", action="store_true",
                   help="Podpowiedzi tylko z --var, bez backendu HTTP")
    p.add_argument("--var", action="append", metavar="ID=NAZWA",
                   help="Zmienna dostępna w podpowiedziach (offline)")
    p.add_argument("--bind", action="append", metavar="ID=WARTOŚĆ",
                   help="Wartość zmiennej o danym id")

    args = parser.parse_args()

    from config import Settings
    logging.basicConfig(level=(args.log_level or Settings().log_level).upper())

    async_cmds = {
        "eval":    _eval,
        "suggest": _suggest,
        "repl":    _repl,
    }
    asyncio.run(async_cmds[args.command](args))


if __name__ == "__main__":
    main()
