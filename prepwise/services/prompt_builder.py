from typing import List, Optional

from prepwise.models.profile import UserProfile
from prepwise.models.structure import InterviewStructure

NOT_SPECIFIED = "Not specified"
NOT_PROVIDED = "Not provided"

DEFAULT_PERSONALIZATION = (
    "Focus on the candidate's specific experience, skills mentioned in their profile, "
    "and practical scenarios related to their background."
)

VOICE_SAFE_RULE = (
    'The questions are going to be read by a voice assistant so do not use "/" or "*" '
    "or any other special characters which might break the voice assistant."
)

PERSONALIZATION_GUIDELINES = """PERSONALIZATION GUIDELINES:
1. Reference specific projects, achievements, or experiences from their profile
2. Ask about technologies they've actually worked with based on their work experience
3. Connect their past roles and responsibilities to the target position
4. Leverage their educational background for relevant technical or domain questions
5. Use their professional summary to understand their career trajectory and goals
6. Ask about specific skills they've listed and how they've applied them
7. Reference their achievements to understand their impact and problem-solving abilities
8. Consider their experience level when framing question complexity"""


def _or(value, fallback: str = NOT_SPECIFIED) -> str:
    return value if value else fallback


def _joined(items: List[str], fallback: str = NOT_SPECIFIED) -> str:
    return ", ".join(items) if items else fallback


def _experience_years(experience: str) -> str:
    if not experience:
        return NOT_SPECIFIED
    try:
        unit = "year" if int(float(experience)) == 1 else "years"
    except (ValueError, OverflowError):
        return experience
    return f"{experience} {unit}"


def render_profile(profile: UserProfile) -> str:
    """Render a profile as the candidate block of the personalization prompt"""
    sections = [
        "USER PROFILE DATA:",
        f"- Current Role: {_or(profile.current_role)}",
        f"- Experience: {_experience_years(profile.experience)}",
        f"- Location: {_or(profile.location)}",
        "",
        "PROFESSIONAL SUMMARY:",
        _or(profile.summary, NOT_PROVIDED),
        "",
        "TECHNICAL SKILLS:",
        _joined(profile.skills),
        "",
        "WORK EXPERIENCE:",
    ]
    if profile.work_experience:
        for exp in profile.work_experience:
            end = "Present" if exp.is_current_job else _or(exp.end_date)
            sections.append(f"- {exp.position} at {exp.company} ({_or(exp.start_date)} - {end})")
            sections.append(f"  Location: {_or(exp.location)}")
            sections.append(f"  Description: {_or(exp.description, NOT_PROVIDED)}")
    else:
        sections.append(NOT_PROVIDED)

    sections += ["", "EDUCATION:"]
    if profile.education:
        for edu in profile.education:
            if edu.summary and not edu.institution:
                sections.append(f"- {edu.summary}")
                continue
            sections.append(
                f"- {edu.degree} in {edu.field_of_study} from {edu.institution} "
                f"({_or(edu.start_date)} - {_or(edu.end_date)})"
            )
            if edu.grade:
                sections.append(f"  Grade: {edu.grade}")
    else:
        sections.append(NOT_PROVIDED)

    sections += ["", "PROJECTS:"]
    if profile.projects:
        for project in profile.projects:
            sections.append(f"- {project.name}")
            sections.append(f"  Description: {_or(project.description, NOT_PROVIDED)}")
            sections.append(f"  Technologies: {_joined(project.technologies)}")
            if project.live_url:
                sections.append(f"  Live URL: {project.live_url}")
            if project.github_url:
                sections.append(f"  GitHub: {project.github_url}")
    else:
        sections.append(NOT_PROVIDED)

    sections += ["", "ACHIEVEMENTS:"]
    if profile.achievements:
        for achievement in profile.achievements:
            sections.append(f"- {achievement.title} ({_or(achievement.date)})")
            sections.append(f"  Organization: {_or(achievement.organization)}")
            sections.append(f"  Description: {_or(achievement.description, NOT_PROVIDED)}")
    else:
        sections.append(NOT_PROVIDED)

    links = profile.social_links
    sections += [
        "",
        "LANGUAGES:",
        _joined(profile.languages),
        "",
        "SOCIAL LINKS:",
        f"- LinkedIn: {_or(links.linkedin, NOT_PROVIDED)}",
        f"- GitHub: {_or(links.github, NOT_PROVIDED)}",
        f"- Portfolio: {_or(links.portfolio, NOT_PROVIDED)}",
    ]
    if profile.resume:
        sections += ["", "RESUME/BACKGROUND:", profile.resume]
    return "\n".join(sections)


def render_job_details(structure) -> str:
    return f"""JOB POSTING DETAILS:
- Job Title: {_or(structure.job_title)}
- Designation: {_or(structure.designation)}
- Location: {_or(structure.location)}
- CTC: {_or(structure.ctc)}
- Key Responsibilities: {_or(structure.responsibilities)}"""


def build_personalized_prompt(
    structure: InterviewStructure,
    profile: Optional[UserProfile] = None,
    resume: Optional[str] = None,
) -> str:
    """Build the instruction for generating a structure's personalized questions.

    The prompt always states the exact count and demands a bare
    ``{"questions": [...]}`` object so the response parser has one shape to look for.
    """
    count = structure.personalized_count
    role = _or(structure.role)
    level = _or(structure.level)
    interview_type = _or(structure.type)
    techstack = _joined(structure.techstack, "relevant technologies")
    directive = structure.personalized_question_prompt.strip() or DEFAULT_PERSONALIZATION

    blocks = [
        f"Generate EXACTLY {count} personalized interview questions based on the candidate's "
        "profile, resume, and the specific requirements below:",
        f"""INTERVIEW STRUCTURE REQUIREMENTS:
- Role: {role}
- Experience Level: {level}
- Tech Stack: {techstack}
- Interview Type: {interview_type}
- Required Question Count: {count}""",
        f"PERSONALIZATION REQUIREMENTS:\n{directive}",
    ]

    if structure.interview_category == "job":
        blocks.append(
            render_job_details(structure)
            + "\n\nTailor questions to assess if the candidate fits this specific job posting."
        )

    if profile is not None:
        blocks.append("CANDIDATE PROFILE:\n" + render_profile(profile))
        blocks.append(PERSONALIZATION_GUIDELINES)
    else:
        blocks.append(
            "No candidate profile is available. Write questions a strong interviewer would ask "
            f"any {role} candidate at the {level} level."
        )

    if resume and resume.strip():
        blocks.append(
            f"CANDIDATE'S RESUME/ADDITIONAL INFO:\n{resume.strip()}\n\n"
            "Use specific details from their resume to create targeted questions."
        )

    blocks.append(f"""CRITICAL INSTRUCTIONS:
1. Generate EXACTLY {count} questions - no more, no less
2. Make questions relevant to the {role} role and {level} experience level
3. Follow the {interview_type} interview type approach
4. Return ONLY a valid JSON object in this exact format: {{"questions": ["Question 1", "Question 2", ...]}}
5. Do not include any text, markdown, explanations, or code blocks before or after the JSON
6. Your response should start with {{ and end with }} - nothing else
7. {VOICE_SAFE_RULE}
8. Make questions conversational and natural for voice interaction""")

    return "\n\n".join(blocks)


def build_compulsory_prompt(
    request,
    kind: str,
    amount: int,
) -> str:
    """Build the structure-wizard prompt for ``amount`` technical or behavioral questions.

    ``request`` is a DraftQuestionsRequest; the answer is expected as a bare JSON array.
    """
    verb = (
        f"Regenerate completely new and different {kind} questions"
        if request.regenerate else f"Generate {kind} questions"
    )
    lines = [
        f"{verb} for a job interview.",
        f"The job role is {request.role}.",
        f"The job experience level is {request.level}.",
    ]
    if kind == "technical":
        lines.append(f"The tech stack used in the job is: {', '.join(request.techstack)}.")
    lines.append(f"The amount of questions required is: {amount}.")

    if request.interview_category == "job":
        lines.append(
            "This is for an actual job opening with these details:\n"
            + render_job_details(request).split("\n", 1)[1]
            + f"\nPlease tailor the {kind} questions to be specific to this job opening."
        )
    else:
        lines.append("This is a mock interview for practice purposes.")

    if request.regenerate:
        lines.append(f"Make sure these {kind} questions are completely different from any previous set.")

    if kind == "behavioral":
        lines.append(
            "Focus on behavioral questions that assess soft skills, past experiences, teamwork, "
            "leadership, problem-solving approach, etc."
        )
    else:
        lines.append(
            "Focus on technical questions related to the specified tech stack, coding problems, "
            "system design, technical concepts, etc."
        )

    lines += [
        "Please return only the questions, without any additional text.",
        VOICE_SAFE_RULE,
        "Return the questions formatted like this:",
        '["Question 1", "Question 2", "Question 3"]',
    ]
    return "\n".join(lines)
