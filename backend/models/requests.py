from pydantic import BaseModel, Field, model_validator

from models.records import JobRecord, ResumeRecord


class ResumeReviewRequest(BaseModel):
    resume_text: str | None = Field(None, max_length=100000, description="Plain text resume content")
    resume: ResumeRecord | None = Field(None, description="Structured resume, used when resume_text is absent")
    provider: str | None = Field(None, description="ollama | openai | deepseek | gemini")
    model_name: str | None = None

    @model_validator(mode="after")
    def _require_resume(self):
        if self.resume_text is None and self.resume is None:
            raise ValueError("Either resume_text or resume is required")
        return self


class JobMatchRequest(ResumeReviewRequest):
    job_text: str | None = Field(None, max_length=100000, description="Job description text")
    job: JobRecord | None = Field(None, description="Structured job, used when job_text is absent")

    @model_validator(mode="after")
    def _require_job(self):
        if self.job_text is None and self.job is None:
            raise ValueError("Either job_text or job is required")
        return self
