"""CLI entry point for med-quiz.

Usage:
  python -m med_quiz serve [--port PORT] [--host HOST]
  python -m med_quiz generate FILE [--index N] [--title TITLE] [--count N]
  python -m med_quiz count FILE
"""
from __future__ import annotations

import json
import sys
from pathlib import Path


def main():
    args = sys.argv[1:]
    command = args[0] if args else "serve"

    if command == "serve":
        _serve(args[1:])
    elif command == "generate":
        _generate(args[1:])
    elif command == "count":
        _count(args[1:])
    else:
        print(f"Unknown command: {command}")
        print("Commands: serve, generate, count")
        sys.exit(1)


def _parse_flag(args: list[str], name: str, default: str) -> str:
    for i, a in enumerate(args):
        if a == name and i + 1 < len(args):
            return args[i + 1]
    return default


def _read_source(args: list[str]) -> tuple[str, str]:
    """Read the FILE argument as text (PDFs are extracted). Returns (text, filename)."""
    if not args or args[0].startswith("--"):
        print("Missing FILE argument.")
        sys.exit(1)
    path = Path(args[0])
    if not path.exists():
        print(f"File not found: {path}")
        sys.exit(1)
    if path.suffix.lower() == ".pdf":
        from med_quiz.parsers.pdf_parser import extract_pdf_text
        return extract_pdf_text(path.read_bytes()), path.name
    if path.suffix.lower() in (".html", ".htm"):
        from med_quiz.parsers.html_parser import extract_main_text
        _, text = extract_main_text(path.read_text())
        return text, path.name
    return path.read_text(), path.name


def _serve(args: list[str]):
    import uvicorn

    port = int(_parse_flag(args, "--port", "3000"))
    host = _parse_flag(args, "--host", "127.0.0.1")
    print(f"Starting Medical Quiz on http://{host}:{port}")
    print("Press Ctrl+C to stop\n")
    uvicorn.run(
        "med_quiz.app:app",
        host=host,
        port=port,
        reload=False,
        timeout_graceful_shutdown=5,
    )


def _generate(args: list[str]):
    from med_quiz.config import load_settings
    from med_quiz.errors import QuizError
    from med_quiz.quiz_builder import generate_quiz

    text, name = _read_source(args)
    try:
        quiz = generate_quiz(
            text,
            title=_parse_flag(args, "--title", name),
            source=name,
            quiz_index=int(_parse_flag(args, "--index", "0")),
            settings=load_settings(),
            question_count=int(_parse_flag(args, "--count", "1")),
        )
    except QuizError as e:
        print(f"Error: {e}")
        sys.exit(1)
    print(json.dumps(quiz.to_dict(), indent=2))


def _count(args: list[str]):
    from med_quiz.config import load_settings
    from med_quiz.errors import QuizError
    from med_quiz.quiz_builder import count_possible_quizzes

    text, name = _read_source(args)
    try:
        n = count_possible_quizzes(text, load_settings())
    except QuizError as e:
        print(f"Error: {e}")
        sys.exit(1)
    print(f"{name}: {n} possible quizzes")


if __name__ == "__main__":
    main()
