"""
ATS resume scoring prompts.
"""


def get_ats_system_prompt() -> str:
    return (
        "You are an expert ATS (Applicant Tracking System) analyzer and resume evaluator. "
        "Provide accurate, data-driven assessments in JSON format only."
    )


def build_ats_prompt(resume_text: str, job_description: str = "") -> str:
    job_section = f"Job Description:\n{job_description}\n\n" if job_description else ""

    return f"""Analyze the following resume and provide a detailed ATS scoring.

{job_section}Resume Content:
{resume_text}

Return a JSON response with the following structure:
{{
  "ats_score": <number 0-100>,
  "breakdown": {{
    "formatting": <number 0-100>,
    "keywords": <number 0-100>,
    "experience": <number 0-100>,
    "education": <number 0-100>,
    "skills": <number 0-100>
  }},
  "strengths": [<3-5 strength points>],
  "weaknesses": [<3-5 weakness points>],
  "recommendations": [<3-5 improvement suggestions>],
  "extracted_skills": [<identified technical skills>],
  "experience_years": <estimated years of experience>,
  "match_percentage": <percentage match with the job description, 0 if none given>
}}

Provide accurate, professional analysis based on industry standards."""
