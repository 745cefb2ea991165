from __future__ import annotations

from datetime import date

from hirelens.ai.types import JsonSchema


def _string(description: str, **extra) -> dict:
    return {"type": "STRING", "description": description, **extra}


def _number(description: str, **extra) -> dict:
    return {"type": "NUMBER", "description": description, **extra}


def _string_list(description: str) -> dict:
    return {"type": "ARRAY", "items": {"type": "STRING"}, "description": description}


def _object(properties: dict, required: list[str], description: str | None = None) -> dict:
    schema: dict = {"type": "OBJECT", "properties": properties, "required": required}
    if description:
        schema["description"] = description
    return schema


_PRIORITY = _string("Priority: 'high' if required, 'medium' if preferred, 'low' if nice to have.", enum=["high", "medium", "low"])


JOB_POSTING_SCHEMA: JsonSchema = _object(
    {
        "salaryMin": _number("Minimum salary mentioned. Null if not present.", nullable=True),
        "salaryMax": _number("Maximum salary mentioned. Null if not present.", nullable=True),
        "workLocationType": _string("Work location type.", enum=["remote", "hybrid", "onsite", "unspecified"]),
        "jobCity": _string("City of the job. Null if not present.", nullable=True),
        "jobState": _string("State or province of the job. Null if not present.", nullable=True),
        "jobCountry": _string("Country of the job. Null if not present.", nullable=True),
        "postingAgeInDays": _number(
            "Days since the job was posted, from text like 'Posted 5 days ago' or a date relative to today. Null if not found.",
            nullable=True,
        ),
        "costOfLivingAnalysis": _object(
            {
                "costOfLivingScore": _number(
                    "Log-normalized 0-100 score of the salary against the local cost of living. "
                    "0 is very poor, 100 is excellent. Null if salary or location is missing.",
                    nullable=True,
                ),
                "reasoning": _string("Brief explanation of the cost of living rating."),
            },
            ["reasoning"],
        ),
        "overallSummary": _string("One-paragraph summary of the posting's quality from an HR perspective."),
    },
    ["workLocationType", "costOfLivingAnalysis", "overallSummary"],
)

ATS_SCHEMA: JsonSchema = _object(
    {
        "matchScore": _number("0-100 score of how well the resume matches the job description."),
        "matchingKeywords": _string_list(
            "Keywords and skills from the job description found anywhere in the resume, "
            "including acronyms and their expanded forms."
        ),
        "missingKeywords": _string_list(
            "Important keywords from the job description absent from the resume in every form, variation and acronym."
        ),
        "summary": _string("Brief summary of the candidate's fit for the role."),
        "suggestions": _string("Actionable suggestions to tailor the resume to this posting."),
    },
    ["matchScore", "matchingKeywords", "missingKeywords", "summary", "suggestions"],
)

EXTRACT_BULLETS_SCHEMA: JsonSchema = _object(
    {
        "bullets": _string_list(
            "Achievement, responsibility and project bullets from the resume, each a complete standalone statement."
        )
    },
    ["bullets"],
)

SELECT_BULLETS_SCHEMA: JsonSchema = _object(
    {
        "selectedBullets": _string_list("The resume bullets most relevant to the job description, wording unchanged."),
        "reasoning": _string("Why these bullets were selected."),
    },
    ["selectedBullets", "reasoning"],
)

RESUME_OPTIMIZATION_SCHEMA: JsonSchema = _object(
    {
        "originalBullets": _string_list("The bullets as provided."),
        "optimizedBullets": {
            "type": "ARRAY",
            "items": _object(
                {
                    "original": _string("The original bullet text."),
                    "optimized": _string(
                        "Improved bullet. Never adds technologies, languages, frameworks or tools absent from the original."
                    ),
                    "improvementReason": _string("How the rewrite strengthens the existing content."),
                    "atsScoreIncrease": _number("Estimated ATS score increase (0-10) for this bullet."),
                },
                ["original", "optimized", "improvementReason", "atsScoreIncrease"],
            ),
            "description": "Optimized bullets with explanations.",
        },
        "overallImprovement": _string("Summary of the overall improvements."),
        "estimatedAtsIncrease": _number("Total estimated ATS score increase (0-50)."),
        "skillRecommendations": {
            "type": "ARRAY",
            "items": _object(
                {
                    "skill": _string("A job skill verified to be absent from the whole resume."),
                    "exampleBullet": _string("Example bullet that would showcase the skill if the candidate had it."),
                    "reason": _string("Why the skill matters for this job."),
                    "priority": _PRIORITY,
                },
                ["skill", "exampleBullet", "reason", "priority"],
            ),
            "description": "Skills the job needs that are truly missing. Only when a job description is provided.",
        },
    },
    ["originalBullets", "optimizedBullets", "overallImprovement", "estimatedAtsIncrease"],
)

COVER_LETTER_SCHEMA: JsonSchema = _object(
    {
        "content": _string("The complete cover letter text."),
        "tone": _string("Tone of the letter, e.g. 'professional', 'enthusiastic', 'confident'."),
        "highlights": _string_list("Key strengths emphasized in the letter."),
    },
    ["content", "tone", "highlights"],
)

SALARY_NEGOTIATION_SCHEMA: JsonSchema = _object(
    {
        "currentOffer": _object(
            {
                "salary": _number("The current salary offer."),
                "location": _string("Job location if provided."),
            },
            ["salary"],
        ),
        "marketAnalysis": _object(
            {
                "marketRate": _number("Estimated market rate for this role."),
                "percentile": _number("Where the offer stands (0-100 percentile)."),
                "comparison": _string("Comparison of the offer to the market."),
            },
            ["marketRate", "percentile", "comparison"],
        ),
        "costOfLivingAdjustment": _number("Cost of living adjustment amount."),
        "recommendedRange": _object(
            {
                "min": _number("Minimum recommended salary."),
                "max": _number("Maximum recommended salary."),
                "target": _number("Target salary to negotiate for."),
            },
            ["min", "max", "target"],
        ),
        "negotiationScript": _string("Sample negotiation script."),
        "talkingPoints": _string_list("Key talking points."),
        "risks": _string_list("Potential risks or considerations."),
    },
    [
        "currentOffer",
        "marketAnalysis",
        "costOfLivingAdjustment",
        "recommendedRange",
        "negotiationScript",
        "talkingPoints",
        "risks",
    ],
)

RESUME_COMPARISON_SCHEMA: JsonSchema = _object(
    {
        "resumeId": _string("Identifier for this resume."),
        "resumeName": _string("Name or version identifier."),
        "matchScore": _number("Match score 0-100."),
        "strengths": _string_list("Strengths of this resume version for the job."),
        "weaknesses": _string_list("Weaknesses or gaps."),
        "recommendation": _string("Brief recommendation."),
    },
    ["resumeId", "resumeName", "matchScore", "strengths", "weaknesses", "recommendation"],
)

SKILL_GAP_SCHEMA: JsonSchema = _object(
    {
        "currentSkills": _string_list("Skills found in the resume."),
        "requiredSkills": _string_list("Skills required by the job."),
        "missingSkills": _string_list("Required skills not found in the resume."),
        "learningRecommendations": {
            "type": "ARRAY",
            "items": _object(
                {
                    "skill": _string("Skill to learn."),
                    "resources": _string_list("Courses, tutorials or other learning resources."),
                    "priority": _PRIORITY,
                },
                ["skill", "resources", "priority"],
            ),
            "description": "Learning plan for the missing skills.",
        },
        "overallGapScore": _number("Overall gap score 0-100, higher means a better match."),
    },
    ["currentSkills", "requiredSkills", "missingSkills", "learningRecommendations", "overallGapScore"],
)

SALARY_SPREAD_SCHEMA: JsonSchema = _object(
    {
        "data": {
            "type": "ARRAY",
            "items": _object(
                {
                    "percentile": _number("Percentile (10, 25, 50, 75, 90)."),
                    "salary": _number("Salary at this percentile."),
                },
                ["percentile", "salary"],
            ),
            "description": "Salary distribution by percentile.",
        },
        "marketAverage": _number("Average market salary."),
        "marketMedian": _number("Median market salary (50th percentile)."),
        "range": _object({"min": _number("Minimum salary."), "max": _number("Maximum salary.")}, ["min", "max"]),
        "sampleSize": _number("Estimated sample size for this analysis."),
    },
    ["data", "marketAverage", "marketMedian", "range", "sampleSize"],
)

JOB_SEARCH_SCHEMA: JsonSchema = _object(
    {
        "jobs": {
            "type": "ARRAY",
            "items": _object(
                {
                    "title": _string("Job title exactly as posted."),
                    "company": _string("Company name."),
                    "location": _string("Job location."),
                    "description": _string("Full job description text."),
                    "salary": _string("Salary range if listed."),
                    "url": _string("Job posting URL."),
                    "postedDate": _string("When the job was posted."),
                    "source": _string("Source website (LinkedIn, Indeed, ...)."),
                },
                ["title", "company", "location", "description"],
            ),
            "description": "Job postings found.",
        }
    },
    ["jobs"],
)


def _fenced(label: str, text: str) -> str:
    return f"{label}:\n---\n{text}\n---"


def job_posting_prompt(job_text: str, today: date | None = None) -> str:
    today = today or date.today()
    return "\n\n".join(
        [
            "Act as an expert HR analyst and recruiter. Analyze the following job posting, extract the "
            "requested information and assess its quality using the JSON schema.",
            _fenced("Job Posting", job_text),
            f"Today's date is {today.isoformat()}.",
        ]
    )


def ats_prompt(resume_text: str, job_description: str) -> str:
    return "\n\n".join(
        [
            "Act as an advanced Applicant Tracking System (ATS). Analyze the resume against the job "
            "description objectively, based on keyword and skill matching.",
            "Keyword matching rules:\n"
            "1. Search every resume section: experience, projects, skills, education, certificates.\n"
            "2. Treat acronyms and their expansions as the same keyword (RNN / recurrent neural network).\n"
            "3. Count keywords found in project or experience descriptions, not only in a skills list.\n"
            "4. Accept variations and related terms (machine learning / ML).\n"
            "5. Mark a keyword missing only when it is absent in every form.",
            _fenced("Job Description", job_description),
            _fenced("Resume", resume_text),
        ]
    )


def extract_bullets_prompt(resume_text: str) -> str:
    return "\n\n".join(
        [
            "Act as a resume parser. Extract every bullet point from the resume text.",
            _fenced("Resume Text", resume_text),
            "Instructions:\n"
            "1. Include work experience, project and other achievement or responsibility bullets.\n"
            "2. Each bullet must be a complete, standalone statement with its original wording.\n"
            "3. Strip bullet symbols (•, -, *) but keep the text.\n"
            "4. Skip section headers, contact details, plain skills lists and bare dates or locations.",
        ]
    )


def select_bullets_prompt(bullets: list[str], job_description: str, max_bullets: int) -> str:
    numbered = "\n".join(f"{index}. {bullet}" for index, bullet in enumerate(bullets, start=1))
    return "\n\n".join(
        [
            "Act as a resume optimization expert. Select the resume bullets most relevant to the job description.",
            _fenced("Job Description", job_description),
            _fenced("All Resume Bullet Points", numbered),
            f"Instructions:\n"
            f"1. Select up to {max_bullets} bullets that best match the job requirements.\n"
            f"2. Prefer bullets naming technologies, skills or tools from the job description, "
            f"showing relevant experience, or quantifying impact.\n"
            f"3. Keep the original wording of the selected bullets.\n"
            f"4. Explain the selection in the reasoning field.",
        ]
    )


_OPTIMIZE_RULES = (
    "Rules:\n"
    "1. Never add technologies, languages, frameworks or tools that the original bullet does not mention.\n"
    "2. Never invent skills, experience or achievements.\n"
    "3. Improve wording, action verbs and clarity; add metrics only when the context implies them.\n"
    "4. Keep the original meaning and scope of the work."
)

_SKILL_CHECK = (
    "Before listing a skill as missing, search the full resume case-insensitively, including "
    "abbreviations, version numbers, framework suffixes (React / React.js), synonyms and skills "
    "implied by other technologies. When in doubt, do not list it. Skill recommendations are "
    "suggestions only and must not be added to the optimized bullets."
)


def optimize_bullets_prompt(
    bullets: list[str],
    job_description: str | None = None,
    full_resume_text: str | None = None,
) -> str:
    parts = [
        "Act as an expert resume writer and ATS optimization specialist. Rewrite the resume bullets "
        "to improve ATS scores and human readability while staying truthful to the original.",
    ]
    if job_description:
        parts.append(_fenced("Target Job Description", job_description))
        parts.append("Align the bullets with this job description.")
    else:
        parts.append("Optimize the bullets for general ATS compatibility and impact.")
    parts.append(_fenced("Resume Bullet Points to Optimize", "\n".join(bullets)))
    if full_resume_text:
        parts.append(_fenced("Full Resume Text (for skill checking)", full_resume_text))
    else:
        parts.append(
            "Only the bullets above are available; be conservative when judging which skills are missing."
        )
    parts.append(_OPTIMIZE_RULES)
    if job_description:
        parts.append(
            "After optimizing, list important job skills that are truly missing from the resume, each with "
            "an example bullet, the reason it matters and a priority.\n" + _SKILL_CHECK
        )
    return "\n\n".join(parts)


def cover_letter_prompt(
    resume_text: str,
    job_description: str,
    applicant_name: str | None = None,
    company_name: str | None = None,
) -> str:
    parts = [
        "Act as an expert cover letter writer. Write a compelling cover letter that connects the "
        "candidate's experience with the job requirements.",
        _fenced("Job Description", job_description),
        _fenced("Candidate Resume", resume_text),
    ]
    if applicant_name:
        parts.append(f"Applicant Name: {applicant_name}")
    if company_name:
        parts.append(f"Company Name: {company_name}")
    parts.append(
        "Requirements:\n"
        "- Tailor the letter to this job and address its key requirements.\n"
        "- Use specific examples from the resume.\n"
        "- Keep it to 3-4 paragraphs in a professional but personable tone."
    )
    return "\n\n".join(parts)


def salary_negotiation_prompt(
    current_offer: float,
    job_title: str,
    location: str | None = None,
    years_of_experience: float | None = None,
) -> str:
    lines = [f"Job Title: {job_title}", f"Current Offer: ${current_offer:,.0f}"]
    if location:
        lines.append(f"Location: {location}")
    if years_of_experience:
        lines.append(f"Years of Experience: {years_of_experience:g}")
    return "\n\n".join(
        [
            "Act as a compensation expert and career advisor. Analyze the salary offer and give negotiation guidance.",
            "\n".join(lines),
            "Provide the market rate, the offer's percentile, cost of living considerations when a location "
            "is given, a recommended negotiation range, a negotiation script, talking points and risks. "
            "Be realistic and practical.",
        ]
    )


def resume_comparison_prompt(resume_name: str, resume_content: str, job_description: str) -> str:
    return "\n\n".join(
        [
            "Analyze this resume version against the job description.",
            _fenced("Job Description", job_description),
            f"Resume Version: {resume_name}",
            _fenced("Resume Content", resume_content),
            "Provide a 0-100 match score, key strengths, weaknesses or gaps and a brief recommendation.",
        ]
    )


def skill_gap_prompt(resume_text: str, job_description: str) -> str:
    return "\n\n".join(
        [
            "Act as a career development advisor. Analyze the skill gap between the resume and the job requirements.",
            _fenced("Job Description", job_description),
            _fenced("Candidate Resume", resume_text),
            "Provide the current skills, the required skills, the missing skills, learning recommendations "
            "with resources and priority for each missing skill, and an overall gap score from 0 to 100 "
            "where 100 is a perfect match.",
        ]
    )


def salary_spread_prompt(job_title: str, location: str | None = None, years_of_experience: float | None = None) -> str:
    scope = job_title
    if location:
        scope += f" in {location}"
    if years_of_experience:
        scope += f" with {years_of_experience:g} years of experience"
    return "\n\n".join(
        [
            f"Act as a salary data analyst. Provide a salary spread analysis for the position: {scope}.",
            "Provide salaries at the 10th, 25th, 50th, 75th and 90th percentiles, the market average, "
            "the market median, the overall range and an estimated sample size. Use realistic USD figures "
            "based on current market data.",
        ]
    )


_SEARCH_RULES = (
    "Return only real, currently published postings. Do not invent jobs, companies or links. "
    "Each job needs the exact title, the real company name, the location as shown, the full "
    "description text, the salary when listed, a working posting URL (for example "
    "https://www.linkedin.com/jobs/view/<id> or https://www.indeed.com/viewjob?jk=<id>), the posted "
    'date and the source site. If no real postings are available, return {"jobs": []}.'
)


def job_search_prompt(
    *,
    job_title: str | None = None,
    location: str | None = None,
    work_type: str | None = None,
    skills: list[str] | None = None,
    experience: str | None = None,
    salary_min: float | None = None,
    salary_max: float | None = None,
) -> str:
    salary = ""
    if salary_min:
        salary = f"${salary_min:,.0f}"
    if salary_max:
        salary += f" - ${salary_max:,.0f}"
    criteria = "\n".join(
        [
            f"- Job Title: {job_title or 'Any relevant position'}",
            f"- Location: {location or 'Any location'}",
            f"- Work Type: {work_type or 'Any'}",
            f"- Skills Required: {', '.join(skills) if skills else 'N/A'}",
            f"- Experience Level: {experience or 'Any'}",
            f"- Salary Range: {salary or 'Any'}",
        ]
    )
    return "\n\n".join(
        [
            "Find current job postings on LinkedIn, Indeed, Glassdoor, Monster, ZipRecruiter and company "
            "career pages that match these criteria:",
            criteria,
            _SEARCH_RULES,
        ]
    )


def resume_job_search_prompt(resume_text: str) -> str:
    return "\n\n".join(
        [
            "From the resume below, infer the roles the candidate is qualified for, their key skills, "
            "years of experience and preferred location, then find matching current job postings on "
            "LinkedIn, Indeed, Glassdoor, Monster, ZipRecruiter and company career pages.",
            _fenced("Resume", resume_text[:2000]),
            _SEARCH_RULES,
        ]
    )
