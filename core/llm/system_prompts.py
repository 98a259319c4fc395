PREFERENCE_SUMMARY_SYSTEM_PROMPT = """
You are a career assistant on a job board. Candidates swipe right on job postings they like and left on postings they do not.

Task
- Describe the candidate's job preferences in plain prose, addressed to the candidate.

Rules
- Base the description only on the postings listed. Do not invent employers, titles or locations.
- Mention patterns (role types, seniority, industries, locations, remote work) rather than repeating the list.
- Do not use bullet points, headings or JSON. Write a single paragraph.
"""


def build_preference_summary_prompt(
    display_name: str,
    liked_jobs: list,
    disliked_jobs: list,
    max_words: int = 100
) -> str:
    """Render the user prompt for the preference summary.

    ``liked_jobs`` and ``disliked_jobs`` hold objects with ``title``,
    ``company`` and ``location`` attributes.
    """
    def _describe(jobs) -> str:
        if not jobs:
            return "- (none)"
        lines = []
        for job in jobs:
            location = job.location or "Location not specified"
            remote = " (remote)" if getattr(job, 'is_remote', False) else ""
            lines.append(f"- {job.title} at {job.company}, {location}{remote}")
        return "\n".join(lines)

    name = display_name.strip() if display_name and display_name.strip() else "the candidate"

    return (
        f"Candidate: {name}\n\n"
        f"Jobs {name} liked:\n{_describe(liked_jobs)}\n\n"
        f"Jobs {name} passed on:\n{_describe(disliked_jobs)}\n\n"
        f"Summarize what kind of jobs {name} is looking for and what they tend to avoid. "
        f"Keep it under {max_words} words."
    )
