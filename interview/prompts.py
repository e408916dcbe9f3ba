"""System prompt and scripted fallback question for each stage."""
from __future__ import annotations

import json
from dataclasses import dataclass
from textwrap import dedent
from typing import Dict, Optional

from config.interview import InterviewConfig

from .state import InterviewState

GENERIC_FALLBACK = "Thank you for your response. Could you tell me more about that?"
CLOSING_TEXT = (
    "Thank you so much for your time today! We'll review your responses and get back to you "
    "within 2 business days."
)


@dataclass(frozen=True)
class ComposedPrompt:
    system_prompt: str
    fallback_question: str


def _money(value: Optional[int]) -> str:
    if value is None:
        return "$?"
    return f"${value:,}"


def _stage_instructions(state: InterviewState, cfg: InterviewConfig) -> Dict[str, str]:
    max_salary = _money(cfg.max_salary)
    return {
        "greeting": "Ask if they're open to discussing the nursing position today.",
        "basic_info": "Ask for their full name in a friendly way.",
        "salary_discussion": f"Ask about their desired salary for the {cfg.company.position} position.",
        "salary_negotiation": (
            f"Their desired salary ({_money(state.desired_salary)}) is above our max of {max_salary}. "
            f"Ask if they'd accept {max_salary}."
        ),
        "license_check": f"Ask if they're a licensed RN in {cfg.company.location}.",
        "license_details": "Ask for their license number and expiration date.",
        "license_timeline": "Ask when they expect to get their RN license.",
        "experience": "Ask if they have at least 2 years of ICU experience.",
        "experience_details": "Ask them to describe a challenging ICU emergency situation they handled.",
        "alternative_experience": "Ask if they have any acute care or hospital experience.",
        "completed": f"Thank them and explain next steps: '{CLOSING_TEXT}'",
    }


def _fallback_questions(state: InterviewState, cfg: InterviewConfig) -> Dict[str, str]:
    return {
        "greeting": "Hello! Are you currently open to discussing this nursing position with us today?",
        "basic_info": "Great! Could you please tell me your full name?",
        "salary_discussion": f"Thank you! What is your desired salary for this {cfg.company.position} position?",
        "salary_negotiation": (
            f"I understand. Our maximum budget for this position is {_money(cfg.max_salary)}. "
            "Would that work for you?"
        ),
        "license_check": f"Perfect! Are you currently a licensed RN in {cfg.company.location}?",
        "license_details": "Excellent! Could you provide your license number and expiration date?",
        "license_timeline": "I see. When do you expect to obtain your RN license?",
        "experience": "Great! Do you have at least 2 years of ICU experience?",
        "experience_details": (
            "Wonderful! Can you tell me about a challenging emergency situation you handled in the ICU?"
        ),
        "alternative_experience": "I understand. Do you have any acute care or hospital experience?",
        "completed": CLOSING_TEXT,
    }


def _preamble(state: InterviewState, cfg: InterviewConfig, stage: str) -> str:
    company = cfg.company
    candidate = json.dumps(state.to_wire(), indent=2)
    return dedent(
        f"""\
        You are conducting a professional nursing interview for an {company.position} position at {company.name}.

        IMPORTANT RULES:
        - Ask ONE question at a time
        - Keep responses concise and professional (2-3 sentences max)
        - Be encouraging and positive
        - Handle company questions with: "{company.name} is a leading medical facility. The ICU position offers {company.benefits}. Schedule: {company.schedule}."
        - If asked about salary range, say "The position pays up to {_money(cfg.max_salary)}"

        Current stage: {stage}
        Candidate info: """
    ) + candidate


def compose(state: InterviewState, cfg: Optional[InterviewConfig] = None) -> ComposedPrompt:
    """Build the LLM system prompt and the scripted question for ``state``.

    Finished conversations, including early exits, get the closing text.
    """

    cfg = cfg or InterviewConfig()
    stage = "completed" if state.completed else state.stage
    instruction = _stage_instructions(state, cfg).get(stage, "")
    fallback = _fallback_questions(state, cfg).get(stage, GENERIC_FALLBACK)
    system_prompt = _preamble(state, cfg, stage)
    if instruction:
        system_prompt += "\n\n" + instruction
    return ComposedPrompt(system_prompt=system_prompt, fallback_question=fallback)


__all__ = ["CLOSING_TEXT", "ComposedPrompt", "GENERIC_FALLBACK", "compose"]
