import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel

from symdelete.batch.dictionary_source import read_dictionary
from symdelete.common.config import settings
from symdelete.spellcheck.builder import IndexBuilder, ReadinessGate
from symdelete.spellcheck.engine import SpellCheckerEngine, Suggestion
from symdelete.spellcheck.index import DictionaryIndex

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


class SuggestionModel(BaseModel):
    word: str
    distance: int
    frequency: int


class SuggestResponse(BaseModel):
    query: str
    max_distance: int
    suggestions: list[SuggestionModel]


class HealthResponse(BaseModel):
    status: str
    words: int


class IndexUnavailableError(RuntimeError):
    pass


class SuggestionService:
    def __init__(self, *, engine: SpellCheckerEngine | None = None, default_limit: int = 0) -> None:
        self.engine = engine or SpellCheckerEngine()
        self.default_limit = default_limit
        self._gate: ReadinessGate | None = None
        self._index: DictionaryIndex | None = None

    def attach(self, gate: ReadinessGate) -> None:
        self._gate = gate
        self._index = None

    @property
    def status(self) -> str:
        if self._index is not None or (self._gate is not None and self._gate.is_ready()):
            return "ready"
        if self._gate is None:
            return "idle"
        if self._gate.is_done():
            return "failed"
        return "building"

    def ready_index(self, timeout: float | None = None) -> DictionaryIndex:
        index = self._index
        if index is not None:
            return index
        if self._gate is None:
            raise IndexUnavailableError("no dictionary index has been built")
        try:
            index = self._gate.wait(timeout=timeout)
        except Exception as exc:
            raise IndexUnavailableError(f"dictionary index is not available: {exc}") from exc
        self._index = index
        return index

    async def wait_ready(self) -> DictionaryIndex:
        if self._index is not None:
            return self._index
        if self._gate is None:
            raise IndexUnavailableError("no dictionary index has been built")
        try:
            await asyncio.wrap_future(self._gate.as_future())
        except Exception as exc:
            raise IndexUnavailableError(f"dictionary index is not available: {exc}") from exc
        return self.ready_index()

    def suggest(self, q: str, *, limit: int | None = None, closest_only: bool = False) -> SuggestResponse:
        index = self.ready_index()
        if limit is None:
            limit = self.default_limit
        suggestions: list[Suggestion] = self.engine.suggest(
            q,
            index,
            limit=limit,
            closest_only=closest_only,
        )
        return SuggestResponse(
            query=self.engine.normalize_word(q),
            max_distance=index.max_distance,
            suggestions=[
                SuggestionModel(word=s.word, distance=s.distance, frequency=s.frequency)
                for s in suggestions
            ],
        )


suggestion_service = SuggestionService(default_limit=settings.suggest_limit)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    entries = await asyncio.to_thread(read_dictionary, settings.dictionary_path)
    builder = IndexBuilder(
        settings.max_distance,
        workers=settings.build_workers,
        chunk_size=settings.build_chunk_size,
        progress_interval=settings.progress_interval,
    )
    suggestion_service.attach(builder.start(entries))
    try:
        yield
    finally:
        builder.abort()


app = FastAPI(title="Symmetric Delete Spelling API", lifespan=lifespan)


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    words = len(suggestion_service.ready_index()) if suggestion_service.status == "ready" else 0
    return HealthResponse(status=suggestion_service.status, words=words)


@app.get("/suggest", response_model=SuggestResponse)
async def suggest(
    q: str = Query(..., min_length=1),
    limit: int | None = Query(None, ge=0, le=1000),
    closest: bool = Query(False),
) -> SuggestResponse:
    try:
        await suggestion_service.wait_ready()
    except IndexUnavailableError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return suggestion_service.suggest(q, limit=limit, closest_only=closest)
