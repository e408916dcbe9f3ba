"""Built-in interview templates shipped with the service."""
from __future__ import annotations

from typing import Tuple

from .models import Template

ICU_NURSE = Template.model_validate(
    {
        "id": "rn-icu-interview",
        "name": "ICU Registered Nurse Interview",
        "description": "Screening interview for ICU RN positions",
        "version": "1.1.0",
        "steps": [
            {
                "id": "interest_check",
                "type": "question",
                "content": "Hello! Are you currently open to discussing this role?",
                "conditions": [
                    {
                        "type": "regex",
                        "value": r"^\s*no\b",
                        "ignore_case": True,
                        "outcome": "exit",
                        "metadata": {"error_message": "Not interested in role"},
                    }
                ],
                "next_steps": {"default": "name", "exit": "not_interested"},
                "metadata": {"tags": ["screening"]},
            },
            {
                "id": "name",
                "type": "question",
                "content": "Great! What's your name?",
                "next_steps": {"default": "salary"},
                "metadata": {"tags": ["personal"]},
            },
            {
                "id": "salary",
                "type": "validation",
                "content": "What is your desired annual salary?",
                "conditions": [
                    {
                        "type": "numeric",
                        "value": "<=72000",
                        "outcome": "license",
                        "metadata": {
                            "error_message": "Please specify a numeric salary, for example 65000.",
                            "validation_hints": ["Maximum salary is $72,000"],
                        },
                    }
                ],
                "next_steps": {"default": "salary_negotiation", "license": "license"},
                "metadata": {"tags": ["compensation"], "constraints": {"max_salary": 72000}},
            },
            {
                "id": "salary_negotiation",
                "type": "question",
                "content": "The max pay is $72,000. Does that work for you?",
                "conditions": [
                    {
                        "type": "regex",
                        "value": r"^\s*(y|yes|ok|sure)",
                        "ignore_case": True,
                        "outcome": "license",
                        "metadata": {"error_message": "Salary requirements not met"},
                    }
                ],
                "next_steps": {"default": "over_budget", "license": "license"},
                "metadata": {"tags": ["compensation", "negotiation"]},
            },
            {
                "id": "license",
                "type": "question",
                "content": "Are you a licensed RN in this state?",
                "conditions": [
                    {
                        "type": "regex",
                        "value": r"^\s*(yes|y\b)",
                        "ignore_case": True,
                        "outcome": "experience_years",
                    }
                ],
                "next_steps": {"default": "license_timing", "experience_years": "experience_years"},
                "metadata": {"tags": ["qualifications"]},
            },
            {
                "id": "license_timing",
                "type": "validation",
                "content": "When (in months) do you expect to get licensed?",
                "conditions": [
                    {
                        "type": "numeric",
                        "value": "<=6",
                        "outcome": "experience_years",
                        "metadata": {
                            "error_message": "Please answer with a number of months.",
                            "validation_hints": ["Must be licensed within 6 months"],
                        },
                    }
                ],
                "next_steps": {"default": "license_too_late", "experience_years": "experience_years"},
                "metadata": {"tags": ["qualifications", "timeline"]},
            },
            {
                "id": "experience_years",
                "type": "question",
                "content": "Do you have at least 2 years of ICU experience?",
                "conditions": [
                    {
                        "type": "regex",
                        "value": r"^\s*yes",
                        "ignore_case": True,
                        "outcome": "experience_story",
                    }
                ],
                "next_steps": {"default": "experience_acute", "experience_story": "experience_story"},
                "metadata": {"tags": ["experience"]},
            },
            {
                "id": "experience_story",
                "type": "question",
                "content": "Tell me about a challenging ICU emergency and how you handled it.",
                "next_steps": {"default": "ending"},
                "metadata": {"tags": ["experience", "behavioral"]},
            },
            {
                "id": "experience_acute",
                "type": "question",
                "content": "Do you have any acute-care experience?",
                "next_steps": {"default": "ending"},
                "metadata": {"tags": ["experience"]},
            },
            {
                "id": "ending",
                "type": "exit",
                "content": "Thanks for your time! We'll be in touch soon.",
                "next_steps": {"default": "exit"},
                "metadata": {"importance": "optional", "tags": ["closing"]},
            },
            {
                "id": "not_interested",
                "type": "exit",
                "content": "No problem, thanks for letting us know. Have a great day!",
                "next_steps": {"default": "exit"},
                "metadata": {"importance": "optional", "tags": ["closing", "early_exit"]},
            },
            {
                "id": "over_budget",
                "type": "exit",
                "content": "Understood. Unfortunately that is beyond our budget for this role. Thank you!",
                "next_steps": {"default": "exit"},
                "metadata": {"importance": "optional", "tags": ["closing", "early_exit"]},
            },
            {
                "id": "license_too_late",
                "type": "exit",
                "content": "Thanks! We need candidates licensed within 6 months, so we'll keep your details on file.",
                "next_steps": {"default": "exit"},
                "metadata": {"importance": "optional", "tags": ["closing", "early_exit"]},
            },
        ],
        "metadata": {
            "role_type": "nursing",
            "required_skills": ["ICU", "RN License"],
            "expected_duration": 15,
            "custom_fields": {"max_salary": 72000, "license_grace_months": 6},
        },
    }
)

SOFTWARE_ENGINEER = Template.model_validate(
    {
        "id": "software-engineer-interview",
        "name": "Software Engineer Interview",
        "description": "Screening interview for senior software engineering roles",
        "version": "1.0.0",
        "steps": [
            {
                "id": "introduction",
                "type": "question",
                "content": "Hi! Thanks for your interest. Are you open to a short screening chat?",
                "conditions": [
                    {
                        "type": "regex",
                        "value": r"^\s*(no|nope|not interested)\b",
                        "ignore_case": True,
                        "outcome": "exit",
                    }
                ],
                "next_steps": {"default": "experience", "exit": "exit_flow"},
                "metadata": {"tags": ["screening"]},
            },
            {
                "id": "experience",
                "type": "validation",
                "content": "How many years of professional software development experience do you have?",
                "conditions": [
                    {
                        "type": "numeric",
                        "value": ">=3",
                        "outcome": "senior",
                        "metadata": {"error_message": "Please answer with a number of years."},
                    }
                ],
                "next_steps": {"default": "exit_flow", "senior": "technical_skills"},
                "metadata": {"tags": ["experience"]},
            },
            {
                "id": "technical_skills",
                "type": "question",
                "content": "Which languages and frameworks do you use day to day?",
                "conditions": [
                    {
                        "type": "regex",
                        "value": r"(react|typescript).*(node|python)",
                        "ignore_case": True,
                        "outcome": "match",
                    }
                ],
                "next_steps": {"default": "salary_expectations", "match": "salary_expectations"},
                "metadata": {"tags": ["skills"]},
            },
            {
                "id": "salary_expectations",
                "type": "validation",
                "content": "What are your annual salary expectations?",
                "conditions": [
                    {
                        "type": "numeric",
                        "value": "<=150000",
                        "outcome": "within_band",
                        "metadata": {"error_message": "Please specify a numeric salary, for example 120000."},
                    }
                ],
                "next_steps": {"default": "exit_flow", "within_band": "schedule_technical"},
                "metadata": {"tags": ["compensation"], "constraints": {"max_salary": 150000}},
            },
            {
                "id": "schedule_technical",
                "type": "question",
                "content": "Are you available for a technical interview next week?",
                "conditions": [
                    {
                        "type": "regex",
                        "value": r"^\s*(no|cannot|unavailable)\b",
                        "ignore_case": True,
                        "outcome": "exit",
                    }
                ],
                "next_steps": {"default": "success_exit", "exit": "exit_flow"},
                "metadata": {"tags": ["scheduling"]},
            },
            {
                "id": "exit_flow",
                "type": "exit",
                "content": "Thank you for your time. We'll be in touch if anything changes.",
                "next_steps": {"default": "exit"},
                "metadata": {"importance": "optional", "tags": ["closing", "early_exit"]},
            },
            {
                "id": "success_exit",
                "type": "exit",
                "content": "Great, a recruiter will reach out to schedule your technical interview.",
                "next_steps": {"default": "exit"},
                "metadata": {"importance": "optional", "tags": ["closing"]},
            },
        ],
        "metadata": {
            "role_type": "software_engineer",
            "required_skills": ["React", "Node.js", "TypeScript", "Python"],
            "expected_duration": 30,
            "custom_fields": {"department": "Engineering", "level": "Senior"},
        },
    }
)

BUILTIN_TEMPLATES: Tuple[Template, ...] = (ICU_NURSE, SOFTWARE_ENGINEER)

__all__ = ["BUILTIN_TEMPLATES", "ICU_NURSE", "SOFTWARE_ENGINEER"]
