from pydantic import BaseModel, Field

from .storage import ProblemRecord


class CompanySearchRequest(BaseModel):
    """Search problems asked at a company for a given role"""

    company_name: str = Field(min_length=1, description="Company to search for")
    role: str = Field(default="SDE", description="Role or level, e.g. SDE1")


class QuerySearchRequest(BaseModel):
    """Free-text search such as 'swiggy sde1'"""

    query: str = Field(min_length=1, description="User search phrase")
    limit: int = Field(default=100, description="Maximum number of problems")


class TitleSearchRequest(BaseModel):
    """Substring search on problem titles"""

    query: str = Field(min_length=1, description="Title fragment or question id")
    limit: int = Field(default=50, ge=1, description="Maximum number of problems")


class ProblemOut(BaseModel):
    """Problem as returned to API clients"""

    id: str
    frontend_question_id: str
    title: str
    title_slug: str
    difficulty: str
    ac_rate: float | None = None
    topic_tags: list[str] = Field(default_factory=list)
    paid_only: bool = False
    has_solution: bool = False
    has_video_solution: bool = False

    @classmethod
    def from_record(cls, record: ProblemRecord) -> "ProblemOut":
        return cls(**record.to_public_dict())
