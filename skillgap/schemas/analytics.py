from typing import List, Optional
from pydantic import BaseModel


class SkillStatOut(BaseModel):
    skill: str
    count: int
    average_rating: Optional[float] = None  # null when nobody rated the skill

class SectionStatOut(BaseModel):
    key: str
    title: str
    count: int
    distinct_skills: int

class SectionBreakdownOut(BaseModel):
    total_responses: int
    overall_average: Optional[float] = None
    sections: List[SectionStatOut]
