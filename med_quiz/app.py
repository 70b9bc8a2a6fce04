"""FastAPI application with all routes."""
from __future__ import annotations

import logging

logging.basicConfig(level=logging.INFO, format="%(name)s | %(message)s")

from fastapi import FastAPI, File, Form, HTTPException, Request, UploadFile

from med_quiz.config import Settings, load_settings, save_settings
from med_quiz.db import Database
from med_quiz.errors import FetchError, QuizError
from med_quiz.fetch import fetch_html, is_valid_http_url
from med_quiz.models import Rating
from med_quiz.parsers.html_parser import extract_main_text
from med_quiz.parsers.pdf_parser import extract_pdf_text
from med_quiz.providers.base import QuizStore
from med_quiz.providers.store_memory import MemoryStore
from med_quiz.quiz_builder import count_possible_quizzes, generate_quiz

app = FastAPI(title="Medical Quiz")

_log = logging.getLogger("med_quiz.api")

# Global state (initialized in startup)
_store: QuizStore | None = None
_settings: Settings | None = None


def get_store() -> QuizStore:
    assert _store is not None
    return _store


def get_settings() -> Settings:
    assert _settings is not None
    return _settings


def _make_store(s: Settings) -> QuizStore:
    if s.store_backend == "memory":
        return MemoryStore(history_limit=s.history_limit)
    elif s.store_backend == "sqlite":
        return Database(s.db_full_path, history_limit=s.history_limit)
    raise ValueError(f"Unknown store backend: {s.store_backend}")


@app.on_event("startup")
async def startup():
    global _store, _settings
    if _store is not None:
        return  # Already initialized (e.g. by tests)
    _settings = load_settings()
    _store = _make_store(_settings)


@app.on_event("shutdown")
async def shutdown():
    if _store:
        _store.close()


@app.get("/health")
async def health():
    return {"ok": True}


# ── Source resolution ─────────────────────────────────────────────────────

async def _resolve_source(body: dict) -> tuple[str, str | None, str | None]:
    """Return ``(text, title, source)`` for a request body with ``url`` or ``text``."""
    url = (body.get("url") or "").strip()
    text = body.get("text") or ""
    title = body.get("title")

    if url:
        if not is_valid_http_url(url):
            raise HTTPException(400, "Please provide a valid http(s) URL.")
        s = get_settings()
        try:
            html = await fetch_html(url, timeout=s.fetch_timeout, retry_delay=s.fetch_retry_delay)
        except FetchError as e:
            raise HTTPException(e.status_code, str(e))
        page_title, text = extract_main_text(html)
        return text, title or page_title, url

    if not text.strip():
        raise HTTPException(400, "Provide either a url or text.")
    return text, title, body.get("source")


def _quiz_index(raw) -> int:
    try:
        return max(0, int(raw or 0))
    except (TypeError, ValueError):
        raise HTTPException(400, f"quizIndex must be an integer (got {raw!r})")


def _build(text: str, title: str | None, source: str | None, quiz_index: int) -> dict:
    try:
        quiz = generate_quiz(
            text,
            title=title,
            source=source,
            quiz_index=quiz_index,
            settings=get_settings(),
        )
    except QuizError as e:
        _log.info("Generation rejected: %s", e)
        raise HTTPException(422, str(e))
    get_store().record_quiz(quiz)
    return quiz.to_dict()


# ── API: Quiz generation ──────────────────────────────────────────────────

@app.post("/api/quiz")
async def api_quiz(request: Request):
    body = await request.json() if await request.body() else {}
    text, title, source = await _resolve_source(body)
    return _build(text, title, source, _quiz_index(body.get("quizIndex")))


@app.post("/api/quiz/count")
async def api_quiz_count(request: Request):
    body = await request.json() if await request.body() else {}
    text, _, _ = await _resolve_source(body)
    try:
        count = count_possible_quizzes(text, get_settings())
    except QuizError as e:
        raise HTTPException(422, str(e))
    return {"totalPossibleCount": count}


@app.post("/api/quiz/upload")
async def api_quiz_upload(
    file: UploadFile = File(...),
    quiz_index: int = Form(0),
    title: str | None = Form(None),
):
    data = await file.read()
    filename = file.filename or "upload"
    if filename.lower().endswith(".pdf") or file.content_type == "application/pdf":
        try:
            text = extract_pdf_text(data)
        except QuizError as e:
            raise HTTPException(422, str(e))
    else:
        text = data.decode("utf-8", errors="replace")
    return _build(text, title or filename, filename, max(0, quiz_index))


# ── API: History ──────────────────────────────────────────────────────────

@app.get("/api/history")
async def api_history(source: str | None = None, limit: int | None = None):
    s = get_settings()
    entries = get_store().query_history(source=source, limit=limit or s.history_limit)
    return [e.to_dict() for e in entries]


@app.post("/api/history/{quiz_id}/score")
async def api_history_score(quiz_id: str, request: Request):
    body = await request.json()
    score = body.get("score")
    if score is None or score == "":
        raise HTTPException(400, "No score provided")
    if not get_store().record_score(quiz_id, str(score)):
        raise HTTPException(404, "Quiz not found")
    return {"ok": True}


@app.delete("/api/history")
async def api_clear_history():
    get_store().clear_history()
    return {"ok": True}


# ── API: Ratings ──────────────────────────────────────────────────────────

@app.post("/api/ratings")
async def api_rate(request: Request):
    body = await request.json()
    if not body.get("quizId") or not body.get("questionId"):
        raise HTTPException(400, "quizId and questionId are required")
    rating = Rating(
        quiz_id=body["quizId"],
        question_id=body["questionId"],
        rating=body.get("rating"),
        comment=body.get("comment", ""),
    )
    try:
        saved = get_store().record_rating(rating)
    except ValueError as e:
        raise HTTPException(400, str(e))
    return saved.to_dict()


@app.get("/api/ratings")
async def api_ratings(
    quiz_id: str | None = None,
    question_id: str | None = None,
    min_rating: int | None = None,
):
    ratings = get_store().query_ratings(
        quiz_id=quiz_id, question_id=question_id, min_rating=min_rating,
    )
    return [r.to_dict() for r in ratings]


# ── API: Settings ─────────────────────────────────────────────────────────

@app.get("/api/settings")
async def api_get_settings():
    return get_settings().to_dict()


@app.put("/api/settings")
async def api_update_settings(request: Request):
    body = await request.json()
    s = get_settings()
    known = {f.name for f in Settings.__dataclass_fields__.values()}
    for k, v in body.items():
        if k in known:
            setattr(s, k, v)
    save_settings(s)
    return s.to_dict()
