# api.py (heuristic resume analysis backend)
import logging
from typing import Optional

from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

import config
from analyzer import InvalidInputError, ResumeAnalyzer
from parser import DocumentDecodeError, UnsupportedDocumentError, extract_text
from reports import build_recommendations, collect_statistics, compare_records, skill_breakdown
from store import RecordNotFoundError, ResumeRecord, ResumeStore

logger = logging.getLogger(__name__)

ANALYZER = ResumeAnalyzer(
    strict_skill_matching=config.STRICT_SKILL_MATCH,
    keyword_limit=config.KEYWORD_LIMIT,
)
STORE = ResumeStore()

app = FastAPI(title="Resume Analyzer")
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class TextPayload(BaseModel):
    text: Optional[str] = None


def _get_record_or_404(record_id: str) -> ResumeRecord:
    try:
        return STORE.get(record_id)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Resume not found")


@app.get("/health")
async def health():
    return {"status": "ok", "resumes": len(STORE)}


# --- Resumes -------------------------------------------------------------------


@app.post("/api/resumes/upload", status_code=201)
async def upload_resume(resume: Optional[UploadFile] = File(None)):
    if resume is None:
        raise HTTPException(status_code=400, detail="No file uploaded")

    # one byte past the limit is enough to tell an oversize upload
    data = await resume.read(config.MAX_UPLOAD_BYTES + 1)
    if len(data) > config.MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"File exceeds the {config.MAX_UPLOAD_BYTES} byte upload limit",
        )

    filename = resume.filename or "resume"
    try:
        text = extract_text(data, resume.content_type, filename)
    except UnsupportedDocumentError as exc:
        raise HTTPException(status_code=415, detail=str(exc))
    except DocumentDecodeError as exc:
        logger.warning("Could not decode %s: %s", filename, exc)
        raise HTTPException(status_code=400, detail="Could not extract text from file")

    try:
        outcome = ANALYZER.analyze(text)
    except InvalidInputError:
        raise HTTPException(status_code=400, detail="Could not extract text from file")

    record = STORE.add(filename, text, outcome)
    return {"message": "Resume uploaded and analyzed successfully", "resume": record.to_dict()}


@app.get("/api/resumes")
async def list_resumes():
    return [record.to_dict() for record in STORE.list()]


@app.get("/api/resumes/{resume_id}")
async def get_resume(resume_id: str):
    return _get_record_or_404(resume_id).to_dict()


@app.delete("/api/resumes/{resume_id}")
async def delete_resume(resume_id: str):
    try:
        STORE.delete(resume_id)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Resume not found")
    return {"message": "Resume deleted successfully"}


@app.post("/api/resumes/{resume_id}/analyze")
async def reanalyze_resume(resume_id: str):
    record = _get_record_or_404(resume_id)
    try:
        outcome = ANALYZER.analyze(record.original_text)
    except InvalidInputError:
        logger.exception("Stored text for resume %s is blank", resume_id)
        raise HTTPException(status_code=400, detail="Stored resume has no text to analyze")
    record = STORE.replace_analysis(resume_id, outcome)
    return {"message": "Resume re-analyzed successfully", "resume": record.to_dict()}


# --- Analysis ------------------------------------------------------------------


@app.get("/api/analysis/stats")
async def get_statistics():
    return collect_statistics(STORE.list())


@app.post("/api/analysis/text")
async def analyze_text(payload: TextPayload):
    try:
        outcome = ANALYZER.analyze(payload.text)
    except InvalidInputError:
        raise HTTPException(status_code=400, detail="No text provided")
    return {"message": "Text analyzed successfully", "analysis": outcome.to_dict()}


@app.get("/api/analysis/compare/{first_id}/{second_id}")
async def compare_resumes(first_id: str, second_id: str):
    try:
        first = STORE.get(first_id)
        second = STORE.get(second_id)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="One or both resumes not found")
    return compare_records(first, second)


@app.get("/api/analysis/skills")
async def get_skill_breakdown():
    return skill_breakdown(STORE.list(), ANALYZER.taxonomy)


@app.get("/api/analysis/recommendations/{resume_id}")
async def get_recommendations(resume_id: str):
    return build_recommendations(_get_record_or_404(resume_id))


def main() -> None:
    import uvicorn

    config.configure_logging()
    uvicorn.run(app, host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    main()
