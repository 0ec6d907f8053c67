"""Builders for raw dataset rows used across the test suite."""


def raw_row(date, salary="", experience="", benefits="", title="Data Scientist"):
    return {
        "posting_date": date,
        "salary_usd": salary,
        "years_experience": experience,
        "benefits_score": benefits,
        "job_title": title,
    }
