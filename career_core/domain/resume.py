"""简历优化场景的输出结构。

RESUME_FIELDS 以声明式结构描述简历内容；build_resume_schema 在其外层
加上 selectedResumeType 枚举（取值为两份候选简历的标签）。
校验通过的 JSON 再由 OptimizationResult.from_payload 转成 dataclass。
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from career_core.domain.schema import SchemaNode, array_of, enum_of, object_of, string


DEFAULT_RESUME_LABELS = ("Software", "Core")

EXPERIENCE_SCHEMA = object_of(
    {
        "role": string(),
        "company": string(),
        "duration": string(),
        "points": array_of(string(), description="Achievement bullet points"),
    }
)

PROJECT_SCHEMA = object_of(
    {
        "name": string(),
        "techStack": string(description="Comma separated technologies"),
        "description": string(),
    }
)

EDUCATION_SCHEMA = object_of(
    {
        "degree": string(),
        "institution": string(),
        "year": string(),
    }
)

RESUME_CONTENT_SCHEMA = object_of(
    {
        "fullName": string(),
        "title": string(description="Professional headline tailored to the job"),
        "contactInfo": string(),
        "summary": string(),
        "skills": array_of(string()),
        "experience": array_of(EXPERIENCE_SCHEMA),
        "projects": array_of(PROJECT_SCHEMA),
        "education": array_of(EDUCATION_SCHEMA),
    }
)


def build_resume_schema(labels: Sequence[str] = DEFAULT_RESUME_LABELS) -> SchemaNode:
    """根据候选简历标签生成完整输出结构。"""

    return object_of(
        {
            "selectedResumeType": enum_of(
                labels, description="Label of the source resume that was chosen"
            ),
            "content": RESUME_CONTENT_SCHEMA,
        }
    )


RESUME_SCHEMA = build_resume_schema()


@dataclass
class ExperienceEntry:
    role: str
    company: str
    duration: str
    points: List[str] = field(default_factory=list)


@dataclass
class ProjectEntry:
    name: str
    tech_stack: str
    description: str


@dataclass
class EducationEntry:
    degree: str
    institution: str
    year: str


@dataclass
class ResumeContent:
    full_name: str
    title: str
    contact_info: str
    summary: str
    skills: List[str] = field(default_factory=list)
    experience: List[ExperienceEntry] = field(default_factory=list)
    projects: List[ProjectEntry] = field(default_factory=list)
    education: List[EducationEntry] = field(default_factory=list)

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "ResumeContent":
        return cls(
            full_name=data["fullName"],
            title=data["title"],
            contact_info=data["contactInfo"],
            summary=data["summary"],
            skills=list(data["skills"]),
            experience=[
                ExperienceEntry(
                    role=e["role"],
                    company=e["company"],
                    duration=e["duration"],
                    points=list(e["points"]),
                )
                for e in data["experience"]
            ],
            projects=[
                ProjectEntry(name=p["name"], tech_stack=p["techStack"], description=p["description"])
                for p in data["projects"]
            ],
            education=[
                EducationEntry(degree=e["degree"], institution=e["institution"], year=e["year"])
                for e in data["education"]
            ],
        )


@dataclass
class OptimizationResult:
    """简历优化结果。

    - selected_resume_type: 模型选中的候选简历标签。
    - ungrounded_skills: 在所选文本简历中找不到出处的技能；
      所选简历是二进制附件时无法核对，值为 None。
    """

    selected_resume_type: str
    content: ResumeContent
    ungrounded_skills: Optional[List[str]] = None

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "OptimizationResult":
        return cls(
            selected_resume_type=data["selectedResumeType"],
            content=ResumeContent.from_payload(data["content"]),
        )
